"""HTTP client for the PDF Service API."""

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx

from .session import SessionContext

logger = logging.getLogger(__name__)

PdfSource = Union[str, Path, bytes]


class ApiError(Exception):
    """Non-2xx response from the service."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details or {}


class PdfServiceClient:
    """Thin synchronous client mirroring the service's REST surface.

    Authentication state lives in the injected ``SessionContext``: signup and
    signin initialize it, signout and any 401 response invalidate it.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionContext,
        *,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.session = session
        self._http = httpx.Client(
            base_url=base_url.rstrip("/") + "/api",
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "PdfServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {**self.session.auth_headers(), **kwargs.pop("headers", {})}
        response = self._http.request(method, path, headers=headers, **kwargs)

        if response.status_code == 401 and self.session.is_authenticated:
            logger.info("Server rejected the session token; signing out")
            self.session.invalidate()
        if response.is_error:
            message, details = self._error_body(response)
            raise ApiError(response.status_code, message, details)
        return response

    @staticmethod
    def _error_body(response: httpx.Response) -> Tuple[str, Dict[str, Any]]:
        """Split an error response into its message and any extra keys."""
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase, {}
        if isinstance(body, dict) and "error" in body:
            details = {k: v for k, v in body.items() if k != "error"}
            return str(body["error"]), details
        return response.reason_phrase, {}

    @staticmethod
    def _pdf_file(source: PdfSource, filename: Optional[str]) -> Dict[str, Any]:
        if isinstance(source, bytes):
            data = source
            name = filename or "document.pdf"
        else:
            path = Path(source)
            data = path.read_bytes()
            name = filename or path.name
        return {"pdf": (name, data, "application/pdf")}

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def signup(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/users/signup", json={"name": name, "email": email, "password": password}
        ).json()
        self.session.init(data["token"], data["user"])
        return data["user"]

    def signin(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request(
            "POST", "/users/signin", json={"email": email, "password": password}
        ).json()
        self.session.init(data["token"], data["user"])
        return data["user"]

    def signout(self) -> None:
        """End the local session. Tokens are not revoked server-side."""
        self.session.invalidate()

    def get_profile(self) -> Dict[str, Any]:
        return self._request("GET", "/users/profile").json()

    def update_profile(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {k: v for k, v in {"name": name, "email": email, "password": password}.items() if v is not None}
        return self._request("PUT", "/users/profile", json=body).json()

    # ------------------------------------------------------------------
    # PDFs
    # ------------------------------------------------------------------

    def upload_pdf(self, source: PdfSource, filename: Optional[str] = None) -> Dict[str, Any]:
        """Upload for background extraction; returns metadata with status ``pending``."""
        return self._request("POST", "/pdfs/upload", files=self._pdf_file(source, filename)).json()

    def extract_and_summarize(
        self,
        source: PdfSource,
        summary: Optional[str] = "concise",
        filename: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {"summary": summary} if summary else None
        return self._request(
            "POST", "/pdfs/extract", params=params, files=self._pdf_file(source, filename)
        ).json()

    def summarize_text(self, text: str, summary_type: str = "concise") -> str:
        data = self._request("POST", "/pdfs/summarize", json={"text": text, "type": summary_type}).json()
        return data["summary"]

    def list_pdfs(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/pdfs/my-pdfs").json()

    def get_pdf(self, document_id: str) -> bytes:
        return self._request("GET", f"/pdfs/{document_id}").content

    def get_pdf_text(self, document_id: str) -> Dict[str, Any]:
        """Current extraction status.

        Pending (202) is returned as data; a failed extraction (500) raises
        ``ApiError``.
        """
        return self._request("GET", f"/pdfs/{document_id}/text").json()

    def reextract(self, document_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/pdfs/{document_id}/extract").json()

    def delete_pdf(self, document_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/pdfs/{document_id}").json()

    def wait_for_text(
        self,
        document_id: str,
        timeout: float = 120.0,
        poll_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Dict[str, Any]:
        """Poll ``get_pdf_text`` until the extraction is no longer pending.

        Raises:
            ApiError: If the extraction failed
            TimeoutError: If it is still pending after ``timeout`` seconds
        """
        deadline = time.monotonic() + timeout
        while True:
            status = self.get_pdf_text(document_id)
            if status.get("status") != "pending":
                return status
            if time.monotonic() >= deadline:
                raise TimeoutError(f"Extraction of {document_id} still pending after {timeout:g}s")
            sleep(poll_interval)
