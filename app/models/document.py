import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class FileType(str, enum.Enum):
    PDF = "pdf"
    DOCX = "docx"
    PPT = "ppt"


class Document(Base):
    """An uploaded study file. Written once at upload time, never updated."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    subject = Column(String(255), nullable=False)

    # Storage reference
    file_url = Column(String(1000), nullable=False)
    storage_id = Column(String(512), nullable=False)
    # Store as string for cross-DB compatibility (SQLite/PostgreSQL)
    file_type = Column(String(10), nullable=False)

    created_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    created_by = relationship("User", foreign_keys=[created_by_user_id])

    __table_args__ = (
        CheckConstraint(
            "file_type IN ('pdf', 'docx', 'ppt')",
            name="ck_documents_file_type",
        ),
        Index("ix_documents_created_at", "created_at"),
        Index("ix_documents_created_by", "created_by_user_id"),
    )
