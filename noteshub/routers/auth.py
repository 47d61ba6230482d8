import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from noteshub.core.errors import NotesHubError
from noteshub.core.notifications import flash, flash_error
from noteshub.core.session import SessionStore, get_session_store
from noteshub.core.templating import render

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(request: Request, store: SessionStore = Depends(get_session_store)):
    tab = request.query_params.get("tab", "login")
    return render(request, "index.html", {"account": store.account, "tab": tab})


@router.post("/signup")
def signup(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    display_name: str = Form(""),
    store: SessionStore = Depends(get_session_store),
):
    try:
        account = store.sign_up(email, password, display_name)
    except NotesHubError as exc:
        flash_error(request, "Signup failed", exc)
        return RedirectResponse(url="/?tab=signup", status_code=303)

    flash(request, "Account created successfully!", f"Welcome, {account.display_name}!")
    return RedirectResponse(url="/", status_code=303)


@router.post("/login")
def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    store: SessionStore = Depends(get_session_store),
):
    try:
        store.log_in(email, password)
    except NotesHubError as exc:
        flash_error(request, "Login failed", exc)
        return RedirectResponse(url="/?tab=login", status_code=303)

    flash(request, "Welcome back!")
    return RedirectResponse(url="/", status_code=303)


@router.post("/logout")
def logout(store: SessionStore = Depends(get_session_store)):
    store.log_out()
    return RedirectResponse(url="/", status_code=303)
