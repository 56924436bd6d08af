"""文档上传与管理 API"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel

from studymate.engine import StudyAssistant
from studymate.entities import Document, DocumentStatus, FileType, SourceFile
from studymate.errors import StudyMateError
from web.core.context import get_assistant
from web.core.errors import http_error

router = APIRouter(prefix="/api/documents", tags=["documents"])


class DocumentResponse(BaseModel):
    id: str
    title: str
    original_file_url: str
    file_type: FileType
    status: DocumentStatus
    extracted_text: str
    created_date: datetime

    @classmethod
    def from_entity(cls, doc: Document) -> "DocumentResponse":
        return cls.model_validate(doc.model_dump())


class DeleteResponse(BaseModel):
    deleted: bool


@router.post("", response_model=DocumentResponse)
async def upload_document(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    assistant: StudyAssistant = Depends(get_assistant)
):
    """上传并处理文档"""
    source = SourceFile(
        filename=file.filename or "upload",
        content=await file.read(),
        content_type=file.content_type or "application/octet-stream",
    )
    try:
        doc = await assistant.upload(source, title=title)
    except StudyMateError as e:
        raise http_error(e) from e
    return DocumentResponse.from_entity(doc)


@router.get("", response_model=List[DocumentResponse])
def list_documents(
    status: Optional[DocumentStatus] = None,
    limit: Optional[int] = Query(None, ge=1),
    assistant: StudyAssistant = Depends(get_assistant)
):
    """列出文档（最新在前）"""
    return [DocumentResponse.from_entity(d) for d in assistant.list_documents(status=status, limit=limit)]


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(document_id: str, assistant: StudyAssistant = Depends(get_assistant)):
    doc = assistant.get_document(document_id)
    if not doc:
        raise HTTPException(status_code=404, detail="Document not found")
    return DocumentResponse.from_entity(doc)


@router.delete("/{document_id}", response_model=DeleteResponse)
def delete_document(document_id: str, assistant: StudyAssistant = Depends(get_assistant)):
    """删除文档（不影响已有问答记录）"""
    return DeleteResponse(deleted=assistant.delete_document(document_id))
