from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.models.document import Document


class CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class OwnerSummary(CamelModel):
    """Display fields of a document's owner. Never includes credentials."""
    id: int
    name: str
    email: str


class DocumentResponse(CamelModel):
    id: int
    title: str
    description: str
    subject: str
    file_url: str
    file_type: str
    storage_id: str
    created_by: OwnerSummary | None = None
    created_at: datetime | None = None


class DocumentEnvelope(BaseModel):
    success: bool = True
    data: DocumentResponse


class DocumentCreatedEnvelope(DocumentEnvelope):
    message: str


class DocumentListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: list[DocumentResponse]


def document_response(document: Document) -> DocumentResponse:
    """Build a DocumentResponse with the owner's display fields attached."""
    owner = document.created_by
    return DocumentResponse(
        id=document.id,
        title=document.title,
        description=document.description or "",
        subject=document.subject,
        file_url=document.file_url,
        file_type=document.file_type,
        storage_id=document.storage_id,
        created_by=OwnerSummary(id=owner.id, name=owner.full_name, email=owner.email) if owner else None,
        created_at=document.created_at,
    )
