"""Business logic for accounts and the document lifecycle."""
