# noteshub/models/upload.py
import enum
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from noteshub.models.database import Base


class Category(str, enum.Enum):
    NOTES = "Notes"
    SYLLABUS = "Syllabus"
    PAST_EXAMS = "Past Exams"
    EXAM_SOLUTIONS = "Exam Solutions"
    HOMEWORK = "Homework"
    CHEAT_SHEET = "Cheat Sheet"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


class UploadRecord(Base):
    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    owner_name = Column(String(50), nullable=False)     # display name at upload time

    course = Column(String(120), nullable=False)
    professor = Column(String(120), nullable=False)
    category = Column(String(32), nullable=False)       # one of Category values
    label = Column(String(255), nullable=False)

    file_name = Column(String(255), nullable=False)     # Name user uploaded
    storage_key = Column(String(512), nullable=False)   # Key in the bucket
    file_url = Column(String(1024), nullable=False)     # Public address of the object
    size = Column(Integer, nullable=False)              # Size in bytes
    content_type = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    upvotes = Column(Integer, nullable=False, default=0)
    downvotes = Column(Integer, nullable=False, default=0)

    # Many uploads → one owner (Account)
    owner = relationship("Account", back_populates="uploads")
    votes = relationship("Vote", back_populates="upload")
