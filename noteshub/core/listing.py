# noteshub/core/listing.py
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from noteshub.models.upload import UploadRecord

DEPARTMENTS = ["COMS", "ECON", "MATH", "PHYS", "CHEM", "BIOL", "ENGL", "HIST", "PSYC", "STAT"]


def list_uploads(db: Session) -> List[UploadRecord]:
    # insertion order
    return db.query(UploadRecord).order_by(UploadRecord.id).all()


def filter_uploads(
    records: Iterable[UploadRecord],
    department: Optional[str] = None,
    search: Optional[str] = None,
) -> List[UploadRecord]:
    """Department prefix on course, then case-insensitive search on course/professor/label."""
    filtered = list(records)

    department = (department or "").strip()
    if department:
        filtered = [r for r in filtered if r.course.startswith(department)]

    term = (search or "").strip().lower()
    if term:
        filtered = [
            r
            for r in filtered
            if term in r.course.lower() or term in r.professor.lower() or term in r.label.lower()
        ]

    return filtered
