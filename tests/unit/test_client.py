import json

import httpx
import pytest

from pdf_service.client import ApiError, PdfServiceClient, SessionContext


class FakeServer:
    """Records requests and answers from a queue of (status, body) pairs."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses.pop(0)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)


def make_client(responses):
    server = FakeServer(responses)
    session = SessionContext()
    client = PdfServiceClient("http://testserver", session, transport=httpx.MockTransport(server))
    return client, session, server


AUTH_BODY = {"user": {"id": "u1", "name": "Alice", "email": "a@example.com"}, "token": "tok-1"}


@pytest.mark.unit
class TestSessionContext:
    def test_init_and_invalidate(self):
        session = SessionContext()
        assert not session.is_authenticated
        assert session.auth_headers() == {}

        session.init("tok", {"id": "u1"})
        assert session.is_authenticated
        assert session.user == {"id": "u1"}
        assert session.auth_headers() == {"Authorization": "Bearer tok"}

        session.invalidate()
        assert session.token is None
        assert session.user is None

    def test_init_requires_token(self):
        with pytest.raises(ValueError):
            SessionContext().init("")


@pytest.mark.unit
class TestPdfServiceClient:
    def test_signin_starts_session_and_sends_token(self):
        client, session, server = make_client([(200, AUTH_BODY), (200, [])])

        user = client.signin("a@example.com", "secret123")
        client.list_pdfs()

        assert user["id"] == "u1"
        assert session.token == "tok-1"
        assert server.requests[0].url.path == "/api/users/signin"
        assert json.loads(server.requests[0].content) == {"email": "a@example.com", "password": "secret123"}
        assert server.requests[1].headers["Authorization"] == "Bearer tok-1"

    def test_401_invalidates_session(self):
        client, session, _ = make_client([(201, AUTH_BODY), (401, {"error": "Token has expired"})])
        client.signup("Alice", "a@example.com", "secret123")

        with pytest.raises(ApiError) as excinfo:
            client.get_profile()

        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Token has expired"
        assert not session.is_authenticated

    def test_other_errors_keep_session(self):
        client, session, _ = make_client([(200, AUTH_BODY), (403, {"error": "Access denied"})])
        client.signin("a@example.com", "secret123")

        with pytest.raises(ApiError, match="Access denied"):
            client.get_pdf("doc-1")

        assert session.is_authenticated

    def test_signout_is_local(self):
        client, session, server = make_client([(200, AUTH_BODY)])
        client.signin("a@example.com", "secret123")

        client.signout()

        assert not session.is_authenticated
        assert len(server.requests) == 1

    def test_upload_sends_multipart_pdf_field(self):
        client, _, server = make_client([(201, {"id": "doc-1", "status": "pending"})])

        result = client.upload_pdf(b"%PDF-1.4 data", filename="report.pdf")

        assert result["status"] == "pending"
        request = server.requests[0]
        assert request.url.path == "/api/pdfs/upload"
        assert b'name="pdf"; filename="report.pdf"' in request.content
        assert b"%PDF-1.4 data" in request.content

    def test_extract_passes_summary_style(self):
        client, _, server = make_client([(200, {"id": "doc-1", "text": "t", "summary": "s"})])

        client.extract_and_summarize(b"%PDF-1.4", summary="bullet")

        assert server.requests[0].url.params["summary"] == "bullet"

    def test_update_profile_omits_unset_fields(self):
        client, _, server = make_client([(200, {"id": "u1", "name": "Bob"})])

        client.update_profile(name="Bob")

        assert json.loads(server.requests[0].content) == {"name": "Bob"}

    def test_error_without_json_body(self):
        client, _, _ = make_client([(500, b"upstream exploded")])

        with pytest.raises(ApiError) as excinfo:
            client.summarize_text("hello")

        assert excinfo.value.message == "upstream exploded"

    def test_wait_for_text_polls_until_completed(self):
        client, _, server = make_client([
            (202, {"id": "doc-1", "status": "pending"}),
            (202, {"id": "doc-1", "status": "pending"}),
            (200, {"id": "doc-1", "status": "completed", "text": "Hello"}),
        ])
        sleeps = []

        status = client.wait_for_text("doc-1", poll_interval=0.5, sleep=sleeps.append)

        assert status["text"] == "Hello"
        assert sleeps == [0.5, 0.5]
        assert len(server.requests) == 3

    def test_wait_for_text_raises_on_failure(self):
        client, _, _ = make_client([(500, {"id": "doc-1", "status": "failed", "error": "Text extraction failed"})])

        with pytest.raises(ApiError) as excinfo:
            client.wait_for_text("doc-1", sleep=lambda _: None)

        assert excinfo.value.status_code == 500

    def test_wait_for_text_times_out(self):
        client, _, _ = make_client([(202, {"id": "doc-1", "status": "pending"})] * 3)

        with pytest.raises(TimeoutError):
            client.wait_for_text("doc-1", timeout=0, sleep=lambda _: None)

    def test_error_details_are_exposed(self):
        client, _, _ = make_client([(500, {"error": "Error generating summary", "id": "doc-9"})])

        with pytest.raises(ApiError) as excinfo:
            client.extract_and_summarize(b"%PDF-1.4", summary="concise")

        assert excinfo.value.message == "Error generating summary"
        assert excinfo.value.details == {"id": "doc-9"}
