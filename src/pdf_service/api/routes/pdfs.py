"""PDF document endpoints."""

import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import JSONResponse, Response

from ...core.document_manager import DocumentManager
from ...models.document import (
    DocumentStatus,
    DocumentSummary,
    ExtractionState,
    ExtractResponse,
)
from ...models.requests import (
    MessageResponse,
    ReextractResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from ..dependencies import get_current_user_id, get_document_manager

router = APIRouter(prefix="/api/pdfs", tags=["pdfs"])
logger = logging.getLogger(__name__)

STATUS_CODES = {
    ExtractionState.COMPLETED: 200,
    ExtractionState.PENDING: 202,
    ExtractionState.FAILED: 500,
}


async def _read_upload(pdf: UploadFile, doc_manager: DocumentManager) -> bytes:
    # One byte past the limit is enough to detect an oversize upload.
    return await pdf.read(doc_manager.max_upload_bytes + 1)


@router.post(
    "/upload",
    response_model=DocumentSummary,
    status_code=201,
    summary="Upload PDF",
    description="""
Store a PDF and extract its text in the background.

**Workflow**:
1. Check content type (`application/pdf`), PDF signature and size (10 MB max)
2. Store the file with status `pending`
3. Start a background extraction task
4. Return the stored metadata immediately

Poll `GET /api/pdfs/{id}/text` for the result. The file is sent as the
multipart field `pdf`.
    """,
    responses={
        201: {"description": "PDF stored, extraction pending"},
        400: {"description": "Missing file or not a PDF"},
        401: {"description": "Missing or invalid authentication"},
        413: {"description": "File larger than the upload limit"},
    }
)
async def upload_pdf(
    pdf: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Upload a PDF for background extraction."""
    data = await _read_upload(pdf, doc_manager)
    document = await doc_manager.upload(user_id, data, pdf.filename or "", pdf.content_type)
    return DocumentSummary.from_document(document)


@router.post(
    "/extract",
    response_model=ExtractResponse,
    response_model_exclude_none=True,
    summary="Extract (and Summarize) PDF",
    description="""
Upload a PDF, extract its text synchronously and, when `summary` is given,
summarize it in the requested style (`concise`, `detailed` or `bullet`).

The document is stored only after extraction succeeded, so it is never seen
in the `pending` state.
    """,
    responses={
        200: {"description": "Text (and summary) returned"},
        400: {"description": "Missing file, not a PDF or unknown summary type"},
        401: {"description": "Missing or invalid authentication"},
        413: {"description": "File larger than the upload limit"},
        500: {"description": "Extraction or summarization failed"},
    }
)
async def extract_pdf(
    pdf: UploadFile = File(...),
    summary: Optional[str] = Query(None, description="Summary style: concise, detailed or bullet"),
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    data = await _read_upload(pdf, doc_manager)
    return await doc_manager.extract_and_summarize(
        user_id, data, pdf.filename or "", pdf.content_type, style=summary or None
    )


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    summary="Summarize Text",
    responses={
        400: {"description": "Missing text or unknown summary type"},
        401: {"description": "Missing or invalid authentication"},
        500: {"description": "Summarization failed"},
    }
)
async def summarize_text(
    body: SummarizeRequest,
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Summarize raw text; nothing is stored."""
    summary = await doc_manager.summarize_text(body.text, body.style)
    return SummarizeResponse(summary=summary)


@router.get(
    "/my-pdfs",
    response_model=List[DocumentSummary],
    summary="List My PDFs",
    responses={401: {"description": "Missing or invalid authentication"}}
)
async def list_my_pdfs(
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """List the caller's PDFs, newest first (metadata only)."""
    documents = await doc_manager.list_documents(user_id)
    return [DocumentSummary.from_document(doc) for doc in documents]


@router.get(
    "/{document_id}",
    summary="Download PDF",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The stored file"},
        403: {"description": "Document belongs to another user"},
        404: {"description": "Document not found"},
    }
)
async def get_pdf(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    stored = await doc_manager.get_file(document_id, user_id)
    return Response(
        content=stored.data,
        media_type=stored.content_type,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(stored.filename)}"},
    )


@router.get(
    "/{document_id}/text",
    response_model=DocumentStatus,
    summary="Get Extracted Text",
    description="""
Report the extraction result of a document.

- `200` `{"status": "completed", "text": ...}` when the text is ready
- `202` `{"status": "pending"}` while extraction is running; poll again
- `500` `{"status": "failed", "error": ...}` when extraction failed; request
  a re-extraction to try again
    """,
    responses={
        202: {"description": "Extraction still pending"},
        403: {"description": "Document belongs to another user"},
        404: {"description": "Document not found"},
        500: {"description": "Extraction failed"},
    }
)
async def get_pdf_text(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    status = await doc_manager.get_status(document_id, user_id)
    return JSONResponse(
        status_code=STATUS_CODES[status.status],
        content=status.model_dump(mode="json", exclude_none=True),
    )


@router.post(
    "/{document_id}/extract",
    response_model=ReextractResponse,
    summary="Re-extract Text",
    description="""
Reset the document to `pending` and run extraction again in the background.
Returns as soon as the reset is stored. Rejected with `409` while a previous
extraction of the same document is still running.
    """,
    responses={
        403: {"description": "Document belongs to another user"},
        404: {"description": "Document not found"},
        409: {"description": "Extraction already in progress"},
    }
)
async def reextract_pdf(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    status = await doc_manager.reextract(document_id, user_id)
    return ReextractResponse(id=status.id, status=status.status)


@router.delete(
    "/{document_id}",
    response_model=MessageResponse,
    summary="Delete PDF",
    responses={
        403: {"description": "Document belongs to another user"},
        404: {"description": "Document not found"},
    }
)
async def delete_pdf(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    doc_manager: DocumentManager = Depends(get_document_manager),
):
    """Delete a PDF permanently."""
    await doc_manager.delete(document_id, user_id)
    return MessageResponse(message="PDF deleted successfully")
