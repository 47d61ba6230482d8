import io
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse, StreamingResponse
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from noteshub.core.config import get_settings
from noteshub.core.errors import NotesHubError, TransferFailed
from noteshub.core.notifications import flash, flash_error
from noteshub.core.session import SessionStore, contributor_redirect, get_session_store
from noteshub.core.storage import FileStorage, get_storage
from noteshub.core.submission import SubmissionForm, submit_upload, validate_submission
from noteshub.core.templating import render
from noteshub.models.database import get_db
from noteshub.models.upload import Category, UploadRecord

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(file_name: str) -> str:
    """Attachment header that survives non-latin-1 names (RFC 5987)."""
    if file_name.isascii() and '"' not in file_name:
        return f'attachment; filename="{file_name}"'
    quoted = quote(file_name, safe="")
    fallback = file_name.encode("ascii", "replace").decode("ascii").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"


@router.get("/upload", response_class=HTMLResponse)
def upload_page(request: Request, store: SessionStore = Depends(get_session_store)):
    if not store.is_authenticated:
        flash(request, "Authentication required", variant="destructive")
        return RedirectResponse(url="/", status_code=303)

    settings = get_settings()
    return render(
        request,
        "upload.html",
        {
            "categories": Category.values(),
            "max_mb": settings.max_upload_bytes // (1024 * 1024),
        },
    )


# --- submit a new study material ---
@router.post("/upload")
async def upload_material(
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    storage: FileStorage = Depends(get_storage),
):
    if not store.is_authenticated:
        flash(request, "Authentication required", variant="destructive")
        return RedirectResponse(url="/", status_code=303)

    settings = get_settings()
    form_data = await request.form()
    form = SubmissionForm(
        course=form_data.get("course", ""),
        professor=form_data.get("professor", ""),
        category=form_data.get("category", ""),
        label=form_data.get("label", ""),
    )

    # Browsers send an empty part when no file was picked
    upload = form_data.get("file")
    file_name, content, content_type = None, b"", None
    try:
        if isinstance(upload, UploadFile) and upload.filename:
            file_name = upload.filename
            # reject oversized parts before pulling them into memory
            validate_submission(form.cleaned(), file_name, upload.size, settings.max_upload_bytes)
            content = await upload.read()
            content_type = upload.content_type

        submit_upload(db, storage, store, form, file_name, content, content_type, settings.max_upload_bytes)
    except NotesHubError as exc:
        flash_error(request, "Upload failed", exc)
        return RedirectResponse(url="/upload", status_code=303)

    flash(request, "Upload successful!", "Your material has been shared with the community")
    return RedirectResponse(url="/", status_code=303)


# --- download a stored file ---
@router.get("/uploads/{upload_id}/download")
def download_material(
    upload_id: int,
    request: Request,
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    storage: FileStorage = Depends(get_storage),
):
    redirect = contributor_redirect(request, store)
    if redirect is not None:
        return redirect

    record = db.get(UploadRecord, upload_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")

    try:
        file_bytes, content_type = storage.get(record.storage_key)
    except TransferFailed as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return StreamingResponse(
        io.BytesIO(file_bytes),
        media_type=content_type,
        headers={
            "Content-Disposition": content_disposition(record.file_name)
        },
    )
