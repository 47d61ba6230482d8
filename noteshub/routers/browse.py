import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from noteshub.core.errors import NotesHubError
from noteshub.core.listing import DEPARTMENTS, filter_uploads, list_uploads
from noteshub.core.notifications import flash, flash_error
from noteshub.core.session import SessionStore, contributor_redirect, get_session_store
from noteshub.core.templating import render
from noteshub.core.voting import cast_vote, votes_for
from noteshub.models.database import get_db
from noteshub.models.vote import VoteDirection

logger = logging.getLogger(__name__)

router = APIRouter()


def _browse_url(department: str, search: str) -> str:
    params = {k: v for k, v in (("department", department), ("search", search)) if v}
    return "/browse" + (f"?{urlencode(params)}" if params else "")


# --- browse everyone's materials ---
@router.get("/browse", response_class=HTMLResponse)
def browse(
    request: Request,
    department: str = "",
    search: str = "",
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    redirect = contributor_redirect(request, store)
    if redirect is not None:
        return redirect

    uploads = list_uploads(db)
    filtered = filter_uploads(uploads, department, search)

    return render(
        request,
        "browse.html",
        {
            "uploads": filtered,
            "total": len(uploads),
            "departments": DEPARTMENTS,
            "department": department,
            "search": search,
            "user_votes": votes_for(db, store.account),
        },
    )


# --- up/down vote an upload ---
@router.post("/uploads/{upload_id}/vote")
def vote(
    upload_id: int,
    request: Request,
    direction: str = Form(...),
    department: str = Form(""),
    search: str = Form(""),
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    redirect = contributor_redirect(request, store)
    if redirect is not None:
        return redirect

    try:
        direction = VoteDirection(direction)
    except ValueError:
        flash(request, "Vote failed", f"Unknown vote direction: {direction}", "destructive")
        return RedirectResponse(url=_browse_url(department, search), status_code=303)

    try:
        cast_vote(db, store.account, upload_id, direction)
    except NotesHubError as exc:
        flash_error(request, "Vote failed", exc)

    return RedirectResponse(url=_browse_url(department, search), status_code=303)
