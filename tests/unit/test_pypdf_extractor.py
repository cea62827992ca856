import pytest
from conftest import make_pdf

from pdf_service.infrastructure.extraction import ExtractionError, PypdfExtractor


@pytest.mark.unit
class TestPypdfExtractor:
    def test_extracts_text_from_every_page(self, hello_world_pdf: bytes) -> None:
        text = PypdfExtractor().extract(hello_world_pdf)

        assert text.count("Hello World") == 2

    def test_pages_are_joined_in_order(self) -> None:
        text = PypdfExtractor().extract(make_pdf(["First page", "Second page"]))

        assert text.index("First page") < text.index("Second page")

    def test_blank_pdf_raises(self, blank_pdf: bytes) -> None:
        with pytest.raises(ExtractionError, match="No extractable text"):
            PypdfExtractor().extract(blank_pdf)

    def test_garbage_raises(self) -> None:
        with pytest.raises(ExtractionError):
            PypdfExtractor().extract(b"%PDF-1.4\nthis is not really a pdf")

    def test_plain_text_raises(self) -> None:
        with pytest.raises(ExtractionError):
            PypdfExtractor().extract(b"just some text")
