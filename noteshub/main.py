import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from noteshub.core.config import get_settings
from noteshub.core.templating import BASE_DIR
from noteshub.models.database import Base, engine
from noteshub.routers import auth, browse, uploads

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="NotesHub")

# the cookie caches only the current account id
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key, session_cookie="noteshub_session")

app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

app.include_router(auth.router)
app.include_router(uploads.router)
app.include_router(browse.router)


@app.get("/health")
def health():
    return {"status": "ok"}
