"""Infrastructure adapters: storage, text extraction and summarization."""
