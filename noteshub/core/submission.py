# noteshub/core/submission.py
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from noteshub.core.errors import TransferFailed, ValidationFailed
from noteshub.core.session import SessionStore
from noteshub.core.storage import FileStorage, build_key
from noteshub.models.upload import Category, UploadRecord

logger = logging.getLogger(__name__)


@dataclass
class SubmissionForm:
    course: str = ""
    professor: str = ""
    category: str = ""
    label: str = ""

    def cleaned(self) -> "SubmissionForm":
        return SubmissionForm(
            course=(self.course or "").strip(),
            professor=(self.professor or "").strip(),
            category=(self.category or "").strip(),
            label=(self.label or "").strip(),
        )


def validate_submission(
    form: SubmissionForm,
    file_name: Optional[str],
    size: Optional[int],
    max_bytes: int,
) -> None:
    """Raise ``ValidationFailed`` naming every unmet precondition."""
    failures = []
    if not form.course:
        failures.append("Course is required")
    if not form.professor:
        failures.append("Professor is required")
    if not form.category:
        failures.append("File type is required")
    elif form.category not in Category.values():
        failures.append(f"Unknown file type: {form.category}")
    if not form.label:
        failures.append("Label is required")
    if not file_name:
        failures.append("File is required")
    elif size is not None and size > max_bytes:
        failures.append(f"File too large, please select a file smaller than {max_bytes // (1024 * 1024)}MB")
    if failures:
        raise ValidationFailed(failures)


def submit_upload(
    db: Session,
    storage: FileStorage,
    session_store: SessionStore,
    form: SubmissionForm,
    file_name: Optional[str],
    content: bytes,
    content_type: Optional[str],
    max_bytes: int,
) -> UploadRecord:
    """Store the file, record its metadata, then mark the uploader as a contributor.

    The three steps are not atomic. A failure after the object is stored
    leaves it orphaned in the bucket, and a failure after the record is
    written leaves the account without browse access until its next upload.
    """
    account = session_store.account
    if account is None:
        raise ValidationFailed(["Authentication required"])

    form = form.cleaned()
    validate_submission(form, file_name, len(content) if content is not None else None, max_bytes)

    key = build_key(account.id, file_name)
    logger.info("starting upload for account %s: key=%s size=%d", account.id, key, len(content))
    file_url = storage.put(key, content, content_type)

    record = UploadRecord(
        owner_id=account.id,
        owner_name=account.display_name,
        course=form.course,
        professor=form.professor,
        category=form.category,
        label=form.label,
        file_name=file_name,
        storage_key=key,
        file_url=file_url,
        size=len(content),
        content_type=content_type,
        upvotes=0,
        downvotes=0,
    )
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("metadata write failed, object %s is orphaned: %s", key, exc)
        raise TransferFailed(f"Database error: {exc}") from exc

    try:
        session_store.mark_contributed()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("upload %s stored but account %s not marked as contributor: %s", record.id, account.id, exc)
        raise TransferFailed("Upload saved, but your account could not be updated") from exc

    logger.info("upload %s stored for account %s", record.id, account.id)
    return record
