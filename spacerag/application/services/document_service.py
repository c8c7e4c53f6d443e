"""
Document service orchestrator.

Accepts documents (inline text or a file already in blob storage),
deduplicates them per space by content hash and hands them to the
pipeline. Reprocess and sync are thin wrappers over the pipeline once
ownership has been checked.

Dependencies: spacerag.boundary.db, spacerag.boundary.storage, spacerag.core.document_processing
System role: Document use case orchestration
"""

import hashlib
import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from spacerag.application.services.access import require_document, require_space
from spacerag.application.upload_utils import (
    FilenameValidationError,
    generate_safe_key,
    resolve_mime_type,
    validate_filename,
)
from spacerag.boundary.db.CRUD import document_crud
from spacerag.boundary.db.models import DocumentModel, DocumentStatus, DocumentType
from spacerag.boundary.storage import BlobStorage
from spacerag.core.document_processing.entrypoint import DocumentPipeline
from spacerag.core.exceptions import ConflictError, ValidationError
from spacerag.models.document import FileRef

logger = logging.getLogger(__name__)


def compute_content_hash(content: str | None, file_key: str | None) -> str:
    """sha256 over the inline text, or over the blob key for file uploads."""
    source = content if content else file_key or ""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


class DocumentService:
    """
    Document service orchestrator.

    Coordinates ownership checks, dedup, blob storage and pipeline
    triggering for documents in a space.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: DocumentPipeline,
        storage: BlobStorage,
        presign_ttl_seconds: int = 3600,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: Async SQLAlchemy session
            pipeline: Document pipeline coordinator
            storage: Blob storage for raw uploads
            presign_ttl_seconds: Lifetime of returned presigned URLs
        """
        self.db = db
        self.pipeline = pipeline
        self.storage = storage
        self.presign_ttl_seconds = presign_ttl_seconds

    async def upload_file(
        self,
        space_id: UUID,
        user_id: str,
        filename: str,
        data: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """
        Store raw file bytes for a later create_document_from_upload.

        Args:
            space_id: Target space
            user_id: Caller
            filename: Original filename
            data: File bytes
            content_type: Declared MIME type (extension is used when generic)

        Returns:
            dict: key, url, size, mime_type, presigned_url, expires_in

        Raises:
            ValidationError: Bad filename, empty file or MIME type outside the allow-list
            NotFoundError / ForbiddenError: Space access
            StorageError: Blob store unavailable
        """
        await require_space(self.db, space_id, user_id)
        try:
            validate_filename(filename)
            mime_type = resolve_mime_type(filename, content_type)
        except FilenameValidationError as e:
            raise ValidationError(str(e), field="file") from e
        if not data:
            raise ValidationError("Uploaded file is empty", field="file")

        key = generate_safe_key(str(space_id), filename)
        stored = await self.storage.put(data, key, mime_type)
        presigned_url = await self.storage.presign(stored.key, self.presign_ttl_seconds)

        logger.info(
            f"{__name__}:upload_file - File stored",
            extra={"space_id": str(space_id), "key": stored.key, "size": stored.size, "mime_type": mime_type},
        )
        return {
            "key": stored.key,
            "url": stored.url,
            "size": stored.size,
            "mime_type": mime_type,
            "presigned_url": presigned_url,
            "expires_in": self.presign_ttl_seconds,
        }

    async def create_document_from_upload(
        self,
        space_id: UUID,
        user_id: str,
        title: str,
        content: str | None = None,
        file: FileRef | None = None,
        metadata: dict[str, Any] | None = None,
        document_type: DocumentType = DocumentType.FILE,
    ) -> DocumentModel:
        """
        Create a document in UPLOADED and start the pipeline.

        Returns:
            DocumentModel: Created document

        Raises:
            ValidationError: Neither content nor file given
            ConflictError: Same content already exists in the space
            NotFoundError / ForbiddenError: Space access
        """
        await require_space(self.db, space_id, user_id)
        if not (content and content.strip()) and file is None:
            raise ValidationError("Either content or file is required", field="content")

        content_hash = compute_content_hash(content, file.key if file else None)
        existing = await document_crud.get_by_content_hash(self.db, space_id, content_hash)
        if existing is not None:
            raise ConflictError(
                "This content already exists in the space",
                details={"document_id": str(existing.id)},
            )

        try:
            document = await document_crud.create(
                self.db,
                space_id=space_id,
                title=title,
                document_type=document_type,
                content=content or "",
                content_hash=content_hash,
                file_key=file.key if file else None,
                file_url=file.url if file else None,
                file_size=file.size if file else None,
                file_mime_type=file.mime_type if file else None,
                document_metadata=metadata or {},
                processing_status=DocumentStatus.UPLOADED,
            )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ConflictError("This content already exists in the space") from e

        logger.info(
            f"{__name__}:create_document_from_upload - Document accepted",
            extra={
                "document_id": str(document.id),
                "space_id": str(space_id),
                "document_type": document_type.value,
                "has_file": file is not None,
            },
        )
        self.pipeline.start(document.id)
        return document

    async def reprocess_document(self, document_id: UUID, user_id: str) -> None:
        """
        Reset a document and run the pipeline again.

        Raises:
            NotFoundError / ForbiddenError: Document access
        """
        await require_document(self.db, document_id, user_id)
        await self.db.commit()
        await self.pipeline.reprocess(document_id)
        logger.info(
            f"{__name__}:reprocess_document - Reprocessing triggered",
            extra={"document_id": str(document_id)},
        )

    async def sync_uploaded_documents(self, space_id: UUID, user_id: str) -> list[UUID]:
        """
        Re-trigger every document of a space stuck in UPLOADED.

        Raises:
            NotFoundError / ForbiddenError: Space access
        """
        await require_space(self.db, space_id, user_id)
        await self.db.commit()
        return await self.pipeline.sync_uploaded(space_id)

    async def list_documents(
        self,
        space_id: UUID,
        user_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[DocumentModel]:
        await require_space(self.db, space_id, user_id)
        return list(await document_crud.get_by_space_id(self.db, space_id, limit=limit, offset=offset))

    async def get_document(self, document_id: UUID, user_id: str) -> DocumentModel:
        """
        Raises:
            NotFoundError / ForbiddenError: Document access
        """
        return await require_document(self.db, document_id, user_id)
