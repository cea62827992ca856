"""Document lifecycle: upload, extraction, summarization, status, deletion."""

import asyncio
import logging
from concurrent.futures import Executor
from uuid import uuid4
from datetime import datetime, timezone
from typing import Optional, List, Union
from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.database.models import DocumentModel
from ..infrastructure.extraction import BaseTextExtractor, ExtractionError
from ..infrastructure.summarization import BaseSummarizer, SummarizationError
from ..models.document import (
    Document,
    DocumentStatus,
    ExtractionState,
    ExtractResponse,
    StoredFile,
    SummaryStyle,
)
from .exceptions import (
    ExtractionInProgressError,
    ForbiddenError,
    NotFoundError,
    PayloadTooLargeError,
    UpstreamError,
    ValidationError,
)
from .job_manager import JobManager

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PDF_MAGIC = b"%PDF-"


def parse_summary_style(value: Union[str, SummaryStyle]) -> SummaryStyle:
    """Map a client-supplied style to ``SummaryStyle``.

    Raises:
        ValidationError: For any value outside the enum
    """
    if isinstance(value, SummaryStyle):
        return value
    try:
        return SummaryStyle(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(style.value for style in SummaryStyle)
        raise ValidationError(
            f"Unsupported summary type '{value}'. Choose from: {allowed}"
        ) from None


def _format_size(num_bytes: int) -> str:
    mib = num_bytes / (1024 * 1024)
    return f"{mib:g}MB" if mib >= 1 else f"{num_bytes} bytes"


class DocumentManager:
    """Business logic for the PDF document lifecycle.

    A document starts ``pending`` and moves to ``completed`` or ``failed``
    when its background extraction finishes. Re-extraction puts it back to
    ``pending``. Background extractions are registered in the ``JobManager``
    so only one can run per document.
    """

    def __init__(
        self,
        db_client: DatabaseClient,
        job_manager: JobManager,
        extractor: BaseTextExtractor,
        summarizer: BaseSummarizer,
        max_upload_bytes: int,
        extraction_timeout_seconds: float,
        executor: Optional[Executor] = None,
    ):
        """Initialize document manager.

        Args:
            db_client: Database client for document storage
            job_manager: Registry of background extraction tasks
            extractor: PDF text extractor (blocking, run in a worker thread)
            summarizer: Language-model summarization client
            max_upload_bytes: Largest accepted payload
            extraction_timeout_seconds: Deadline for a single extraction
            executor: Thread pool for the extractor (default loop executor if None)
        """
        self.db = db_client
        self.jobs = job_manager
        self.extractor = extractor
        self.summarizer = summarizer
        self.max_upload_bytes = max_upload_bytes
        self.extraction_timeout = extraction_timeout_seconds
        self.executor = executor

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def validate_upload(self, data: bytes, content_type: Optional[str]) -> None:
        """Reject anything that is not a PDF within the size limit.

        Raises:
            ValidationError: Wrong content type, empty or non-PDF payload
            PayloadTooLargeError: Payload above ``max_upload_bytes``
        """
        media_type = (content_type or "").split(";")[0].strip().lower()
        if media_type != PDF_CONTENT_TYPE:
            raise ValidationError("Only PDF files are allowed")
        if not data:
            raise ValidationError("No PDF file provided")
        if len(data) > self.max_upload_bytes:
            raise PayloadTooLargeError(
                f"File size is too large. Maximum size is {_format_size(self.max_upload_bytes)}."
            )
        if not data.startswith(PDF_MAGIC):
            raise ValidationError("File is not a valid PDF")

    async def _get_owned(self, document_id: str, requester_id: str, include_data: bool = False) -> DocumentModel:
        db_doc = await self.db.get_document(document_id, include_data=include_data)
        if not db_doc:
            raise NotFoundError("PDF not found")
        if db_doc.user_id != requester_id:
            logger.warning(f"User {requester_id} denied access to document {document_id}")
            raise ForbiddenError("Access denied")
        return db_doc

    @staticmethod
    def _to_document(db_doc: DocumentModel, include_text: bool = True) -> Document:
        return Document(
            document_id=db_doc.document_id,
            user_id=db_doc.user_id,
            original_name=db_doc.original_name,
            size_bytes=db_doc.size_bytes,
            content_type=db_doc.content_type,
            extraction_state=db_doc.extraction_state,
            extracted_text=db_doc.extracted_text if include_text else None,
            created_at=db_doc.created_at,
            updated_at=db_doc.updated_at,
        )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def _extract(self, data: bytes) -> str:
        """Run the blocking extractor on ``self.executor`` under the deadline.

        A timeout abandons the call but cannot stop a thread that already
        started parsing; it keeps its pool slot until pypdf returns. Work still
        queued when the deadline passes is dropped. With a bounded pool, pathological PDFs
        can only delay other extractions.

        Raises:
            ExtractionError: On extractor failure, empty text or timeout
        """
        loop = asyncio.get_running_loop()
        try:
            text = await asyncio.wait_for(
                loop.run_in_executor(self.executor, self.extractor.extract, data),
                timeout=self.extraction_timeout,
            )
        except asyncio.TimeoutError:
            raise ExtractionError(
                f"Extraction timed out after {self.extraction_timeout:g}s"
            ) from None
        if not text or not text.strip():
            raise ExtractionError("No extractable text found in PDF")
        return text

    async def _run_extraction(self, document_id: str, data: bytes) -> None:
        """Background job body: extract and record the terminal state."""
        try:
            text = await self._extract(data)
        except ExtractionError as e:
            logger.warning(f"Extraction failed for document {document_id}: {e}")
            await self.db.set_extraction_state(document_id, ExtractionState.FAILED.value, error=str(e))
            return
        except Exception as e:
            logger.exception(f"Unexpected extraction error for document {document_id}")
            await self.db.set_extraction_state(
                document_id, ExtractionState.FAILED.value, error=f"{type(e).__name__}: {e}"
            )
            return

        updated = await self.db.set_extraction_state(
            document_id, ExtractionState.COMPLETED.value, extracted_text=text
        )
        if updated:
            logger.info(f"Extraction completed for document {document_id} ({len(text)} chars)")
        else:
            logger.info(f"Document {document_id} was deleted before extraction finished")

    async def _summarize(self, text: str, style: SummaryStyle, document_id: Optional[str] = None) -> str:
        try:
            return await self.summarizer.summarize(text, style)
        except SummarizationError as e:
            logger.error(f"Summarization failed ({style.value}): {e}")
            details = {"id": document_id} if document_id else None
            raise UpstreamError("Error generating summary", details=details) from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def upload(
        self,
        owner_id: str,
        data: bytes,
        original_name: str,
        content_type: Optional[str],
    ) -> Document:
        """Store a PDF as ``pending`` and extract its text in the background.

        Returns immediately with the stored metadata; poll ``get_status`` for
        the text.
        """
        self.validate_upload(data, content_type)

        now = datetime.now(timezone.utc)
        db_doc = DocumentModel(
            document_id=str(uuid4()),
            user_id=owner_id,
            original_name=original_name or "document.pdf",
            size_bytes=len(data),
            content_type=PDF_CONTENT_TYPE,
            data=data,
            extraction_state=ExtractionState.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        created = await self.db.create_document(db_doc)
        document_id = created.document_id

        self.jobs.start_job(document_id, "extraction", lambda: self._run_extraction(document_id, data))
        logger.info(f"Uploaded document {document_id} for user {owner_id} ({len(data)} bytes)")
        return self._to_document(created)

    async def get_status(self, document_id: str, requester_id: str) -> DocumentStatus:
        """Report the extraction state; text is only returned once completed."""
        db_doc = await self._get_owned(document_id, requester_id)
        state = ExtractionState(db_doc.extraction_state)

        if state == ExtractionState.COMPLETED:
            return DocumentStatus(id=document_id, status=state, text=db_doc.extracted_text)
        if state == ExtractionState.FAILED:
            return DocumentStatus(id=document_id, status=state, error="Text extraction failed")
        return DocumentStatus(id=document_id, status=state)

    async def reextract(self, document_id: str, requester_id: str) -> DocumentStatus:
        """Reset the document to ``pending`` and extract again in the background.

        The reset is written before this returns, so a status call issued
        afterwards never sees the previous text.

        Raises:
            ExtractionInProgressError: If an extraction is still running
        """
        db_doc = await self._get_owned(document_id, requester_id, include_data=True)
        if self.jobs.is_running(document_id):
            raise ExtractionInProgressError(
                "Text extraction is already in progress for this document"
            )

        data = db_doc.data
        await self.db.set_extraction_state(document_id, ExtractionState.PENDING.value)
        self.jobs.start_job(document_id, "reextraction", lambda: self._run_extraction(document_id, data))
        logger.info(f"Re-extraction requested for document {document_id}")
        return DocumentStatus(id=document_id, status=ExtractionState.PENDING)

    async def extract_and_summarize(
        self,
        owner_id: str,
        data: bytes,
        original_name: str,
        content_type: Optional[str],
        style: Optional[Union[str, SummaryStyle]] = None,
    ) -> ExtractResponse:
        """Upload, extract and optionally summarize in a single blocking call.

        The document is only persisted once its text is known, so clients
        never observe it as ``pending``. If summarization then fails, the
        ``UpstreamError`` carries the stored document id in its details.
        """
        self.validate_upload(data, content_type)
        summary_style = parse_summary_style(style) if style else None

        try:
            text = await self._extract(data)
        except ExtractionError as e:
            logger.warning(f"Inline extraction failed for '{original_name}': {e}")
            raise UpstreamError("Error extracting text from PDF") from e

        now = datetime.now(timezone.utc)
        db_doc = DocumentModel(
            document_id=str(uuid4()),
            user_id=owner_id,
            original_name=original_name or "document.pdf",
            size_bytes=len(data),
            content_type=PDF_CONTENT_TYPE,
            data=data,
            extracted_text=text,
            extraction_state=ExtractionState.COMPLETED.value,
            created_at=now,
            updated_at=now,
        )
        created = await self.db.create_document(db_doc)
        logger.info(f"Extracted document {created.document_id} for user {owner_id}")

        summary = None
        if summary_style is not None:
            summary = await self._summarize(text, summary_style, document_id=created.document_id)

        return ExtractResponse(
            id=created.document_id,
            filename=created.original_name,
            file_size=created.size_bytes,
            text=text,
            summary=summary,
        )

    async def summarize_text(self, text: str, style: Union[str, SummaryStyle]) -> str:
        """Summarize raw text without touching the document store."""
        summary_style = parse_summary_style(style)
        if not text or not text.strip():
            raise ValidationError("Text is required")
        return await self._summarize(text, summary_style)

    async def list_documents(self, owner_id: str) -> List[Document]:
        """List the owner's documents, newest first, without text."""
        db_docs = await self.db.list_documents(owner_id)
        return [self._to_document(doc, include_text=False) for doc in db_docs]

    async def get_file(self, document_id: str, requester_id: str) -> StoredFile:
        db_doc = await self._get_owned(document_id, requester_id, include_data=True)
        return StoredFile(
            filename=db_doc.original_name,
            content_type=db_doc.content_type,
            data=db_doc.data,
        )

    async def delete(self, document_id: str, requester_id: str) -> None:
        """Delete a document, cancelling its extraction if one is running.

        Raises:
            NotFoundError: If the document does not exist (also on repeat calls)
        """
        await self._get_owned(document_id, requester_id)
        self.jobs.cancel(document_id)

        deleted = await self.db.delete_document(document_id)
        if not deleted:
            raise NotFoundError("PDF not found")
        logger.info(f"Deleted document {document_id}")
