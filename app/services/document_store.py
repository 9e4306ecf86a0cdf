from sqlalchemy.orm import Session, joinedload

from app.models.document import Document


def create_document(
    db: Session,
    *,
    title: str,
    description: str,
    subject: str,
    file_url: str,
    storage_id: str,
    file_type: str,
    owner_id: int,
) -> Document:
    """Persist a new document and return it with its owner loaded."""
    document = Document(
        title=title,
        description=description or "",
        subject=subject,
        file_url=file_url,
        storage_id=storage_id,
        file_type=file_type,
        created_by_user_id=owner_id,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return get_document(db, document.id)


def list_documents(db: Session) -> list[Document]:
    """All documents, newest first, with owners joined."""
    return (
        db.query(Document)
        .options(joinedload(Document.created_by))
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )


def get_document(db: Session, document_id: int) -> Document | None:
    return (
        db.query(Document)
        .options(joinedload(Document.created_by))
        .filter(Document.id == document_id)
        .first()
    )
