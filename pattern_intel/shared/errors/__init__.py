"""Translation of pattern domain errors into HTTP responses."""
