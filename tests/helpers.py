from starlette.requests import Request

TEST_BUCKET = "test-bucket"


def make_request(session=None) -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "session": session or {}})


def signup(client, email="a@x.edu", display_name="Foo", password="hunter22"):
    return client.post(
        "/signup",
        data={"email": email, "password": password, "display_name": display_name},
        follow_redirects=False,
    )


def login(client, email="a@x.edu", password="hunter22"):
    return client.post("/login", data={"email": email, "password": password}, follow_redirects=False)


def upload(client, content=b"%PDF-1.4 notes", file_name="notes.pdf", **fields):
    data = {
        "course": "COMS 3157",
        "professor": "Jae Lee",
        "category": "Notes",
        "label": "Midterm 1 Study Guide",
    }
    data.update(fields)
    return client.post(
        "/upload",
        data=data,
        files={"file": (file_name, content, "application/pdf")},
        follow_redirects=False,
    )
