"""Pattern intelligence HTTP endpoints."""
