"""Shared fixtures: generated PDFs, fake collaborators and an app factory."""

import io
import threading
import time
from typing import Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from pdf_service.config.settings import Settings
from pdf_service.infrastructure.extraction import BaseTextExtractor, ExtractionError, PypdfExtractor
from pdf_service.infrastructure.summarization import BaseSummarizer, SummarizationError, build_instruction
from pdf_service.main import create_app
from pdf_service.models.document import SummaryStyle


# ----------------------------------------------------------------------
# PDFs
# ----------------------------------------------------------------------

def make_pdf(pages: List[str]) -> bytes:
    """Render one line of text per page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def hello_world_pdf() -> bytes:
    """Two pages, each containing "Hello World"."""
    return make_pdf(["Hello World", "Hello World"])


@pytest.fixture()
def blank_pdf() -> bytes:
    """A valid PDF without any text."""
    return make_pdf([""])


# ----------------------------------------------------------------------
# Fake collaborators
# ----------------------------------------------------------------------

class FakeSummarizer(BaseSummarizer):
    """Deterministic summarizer that records the instruction it would send."""

    def __init__(self):
        self.calls: List[Dict[str, object]] = []

    async def summarize(self, text: str, style: SummaryStyle) -> str:
        self.calls.append({"text": text, "style": style, "instruction": build_instruction(style)})
        words = text.split()
        if style == SummaryStyle.BULLET:
            return "\n".join(f"- {word}" for word in words[:3])
        if style == SummaryStyle.DETAILED:
            return f"Detailed summary of {len(words)} words: {' '.join(words)}"
        return f"Summary: {' '.join(words[:2])}"


class FailingSummarizer(BaseSummarizer):
    def __init__(self):
        self.calls = 0

    async def summarize(self, text: str, style: SummaryStyle) -> str:
        self.calls += 1
        raise SummarizationError("provider exploded with internal details")


class CountingExtractor(BaseTextExtractor):
    """Real pypdf extraction that counts how often it is called."""

    def __init__(self):
        self.calls = 0
        self._inner = PypdfExtractor()

    def extract(self, data: bytes) -> str:
        self.calls += 1
        return self._inner.extract(data)


class GatedExtractor(BaseTextExtractor):
    """Blocks every extraction until ``release`` is set.

    Each call returns the next entry of ``results``; an entry that is an
    exception is raised instead.
    """

    def __init__(self, results: Optional[List[object]] = None):
        self.release = threading.Event()
        self.started = threading.Event()
        self.results = list(results or ["gated text"])
        self.calls = 0

    def extract(self, data: bytes) -> str:
        index = min(self.calls, len(self.results) - 1)
        self.calls += 1
        self.started.set()
        if not self.release.wait(timeout=10):
            raise ExtractionError("gate never released")
        result = self.results[index]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture()
def fake_summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture()
def failing_summarizer() -> FailingSummarizer:
    return FailingSummarizer()


@pytest.fixture()
def counting_extractor() -> CountingExtractor:
    return CountingExtractor()


@pytest.fixture()
def gated_extractor() -> GatedExtractor:
    return GatedExtractor()


# ----------------------------------------------------------------------
# Application
# ----------------------------------------------------------------------

@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        openai_api_key="",
        extraction_timeout_seconds=10,
        log_level="WARNING",
    )


@pytest.fixture()
def make_client(settings, fake_summarizer):
    """Factory for started TestClients; extractor and summarizer are injectable."""
    started = []

    def _make(
        extractor: Optional[BaseTextExtractor] = None,
        summarizer: Optional[BaseSummarizer] = None,
        **overrides,
    ) -> TestClient:
        app_settings = settings.model_copy(update=overrides)
        app = create_app(
            app_settings,
            extractor=extractor or PypdfExtractor(),
            summarizer=summarizer or fake_summarizer,
        )
        client = TestClient(app)
        client.__enter__()
        started.append((client, extractor))
        return client

    yield _make

    for client, extractor in reversed(started):
        if isinstance(extractor, GatedExtractor):
            extractor.release.set()
        client.__exit__(None, None, None)


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


@pytest.fixture()
def register() -> Callable[..., Dict[str, str]]:
    """Sign up a user and return its Authorization header."""

    def _register(client: TestClient, email: str = "alice@example.com", name: str = "Alice",
                  password: str = "secret123") -> Dict[str, str]:
        response = client.post(
            "/api/users/signup",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


def upload(client: TestClient, headers: Dict[str, str], data: bytes,
           filename: str = "doc.pdf", content_type: str = "application/pdf", path: str = "/api/pdfs/upload",
           params: Optional[Dict[str, str]] = None):
    return client.post(path, headers=headers, params=params, files={"pdf": (filename, data, content_type)})


def wait_for_text(client: TestClient, document_id: str, headers: Dict[str, str], timeout: float = 10.0):
    """Poll the text endpoint until it stops answering 202.

    Also waits for the background task to unregister, so a follow-up
    re-extraction is not rejected as overlapping.
    """
    deadline = time.monotonic() + timeout
    while True:
        response = client.get(f"/api/pdfs/{document_id}/text", headers=headers)
        if response.status_code != 202 or time.monotonic() >= deadline:
            break
        time.sleep(0.05)
    while time.monotonic() < deadline and client.get("/api/health").json()["active_extractions"]:
        time.sleep(0.05)
    return response


@pytest.fixture()
def upload_pdf():
    return upload


@pytest.fixture()
def poll_text():
    return wait_for_text
