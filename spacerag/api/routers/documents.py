"""
Document API endpoints.

Routes:
- POST /spaces/{id}/documents - Create document from text or an uploaded file
- POST /spaces/{id}/documents/upload - Upload raw file bytes (multipart)
- GET /spaces/{id}/documents - List space documents
- POST /spaces/{id}/documents/sync - Re-trigger documents stuck in UPLOADED
- GET /documents/{id} - Document status, last error and chunk count
- POST /documents/{id}/reprocess - Reset and run the pipeline again

Dependencies: spacerag.application.services, spacerag.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from spacerag.api.deps import get_current_user_id, get_document_service
from spacerag.application.services import DocumentService
from spacerag.models.common import ListResponse
from spacerag.models.document import (
    DocumentCreatedResponse,
    DocumentCreateRequest,
    DocumentResponse,
    SyncResponse,
    UploadedFileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post(
    "/spaces/{space_id}/documents/upload",
    response_model=UploadedFileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_file(
    space_id: UUID,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> UploadedFileResponse:
    """
    Store a file in blob storage.

    The returned reference is passed as `file` to the create endpoint.
    """
    data = await file.read()
    uploaded = await service.upload_file(
        space_id,
        user_id,
        filename=file.filename or "",
        data=data,
        content_type=file.content_type,
    )
    return UploadedFileResponse(**uploaded)


@router.post(
    "/spaces/{space_id}/documents",
    response_model=DocumentCreatedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def create_document(
    space_id: UUID,
    request: DocumentCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentCreatedResponse:
    """
    Accept a document and start processing in the background.

    Poll GET /documents/{id} for status.
    """
    document = await service.create_document_from_upload(
        space_id,
        user_id,
        title=request.title,
        content=request.content,
        file=request.file,
        metadata=request.metadata,
        document_type=request.document_type,
    )
    return DocumentCreatedResponse(id=document.id)


@router.get("/spaces/{space_id}/documents", response_model=ListResponse[DocumentResponse])
async def list_documents(
    space_id: UUID,
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> ListResponse[DocumentResponse]:
    documents = await service.list_documents(space_id, user_id, limit=limit, offset=offset)
    return ListResponse[DocumentResponse](
        items=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.post("/spaces/{space_id}/documents/sync", response_model=SyncResponse)
async def sync_documents(
    space_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> SyncResponse:
    triggered = await service.sync_uploaded_documents(space_id, user_id)
    return SyncResponse(triggered=triggered)


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    return DocumentResponse.model_validate(await service.get_document(document_id, user_id))


@router.post(
    "/documents/{document_id}/reprocess",
    response_model=DocumentCreatedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def reprocess_document(
    document_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: DocumentService = Depends(get_document_service),
) -> DocumentCreatedResponse:
    await service.reprocess_document(document_id, user_id)
    return DocumentCreatedResponse(id=document_id)
