"""Google API helpers (OAuth and Calendar)."""
