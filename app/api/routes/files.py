from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_generator, get_storage, require_teacher
from app.db.database import get_db
from app.models.user import User
from app.schemas.artifact import QuizEnvelope, SummaryEnvelope
from app.schemas.document import (
    DocumentCreatedEnvelope,
    DocumentEnvelope,
    DocumentListEnvelope,
    document_response,
)
from app.services import artifact_service
from app.services.artifact_service import load_document
from app.services.document_store import list_documents
from app.services.upload_service import upload_document

router = APIRouter(prefix="/files", tags=["Files"])


# ============================================
# Upload (teachers only)
# ============================================


@router.post("", response_model=DocumentCreatedEnvelope, status_code=status.HTTP_201_CREATED)
async def upload_file(
    current_user: User = Depends(require_teacher),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    subject: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    """
    Upload a study file (PDF, DOCX, PPT or PPTX, 10 MB max by default).

    The file is stored remotely and recorded; the local copy never outlives the request.
    """
    document = await upload_document(
        db,
        storage,
        title=title,
        description=description,
        subject=subject,
        upload=file,
        owner=current_user,
    )
    return DocumentCreatedEnvelope(
        message="File uploaded successfully",
        data=document_response(document),
    )


# ============================================
# Browse
# ============================================


@router.get("", response_model=DocumentListEnvelope)
def get_all_files(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List all documents, newest first."""
    documents = list_documents(db)
    return DocumentListEnvelope(
        count=len(documents),
        data=[document_response(d) for d in documents],
    )


@router.get("/{file_id}", response_model=DocumentEnvelope)
def get_file(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DocumentEnvelope(data=document_response(load_document(db, file_id)))


# ============================================
# AI study aids
# ============================================


@router.get("/{file_id}/summary", response_model=SummaryEnvelope)
async def get_summary(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    generator=Depends(get_generator),
):
    """Generate a fresh AI summary from the document's metadata."""
    data = await artifact_service.generate_summary(db, file_id, generator)
    return SummaryEnvelope(data=data)


@router.get("/{file_id}/quiz", response_model=QuizEnvelope)
async def get_quiz(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    generator=Depends(get_generator),
):
    """Generate a fresh five question multiple-choice quiz."""
    data = await artifact_service.generate_quiz(db, file_id, generator)
    return QuizEnvelope(data=data)
