"""PDF Service: upload PDFs, extract their text and summarize it."""

__version__ = "1.0.0"
