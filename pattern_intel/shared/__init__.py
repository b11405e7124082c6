"""Cross-cutting pieces: logging setup, error mapping, headers and rate limits."""
