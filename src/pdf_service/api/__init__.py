"""HTTP API for PDF Service."""
