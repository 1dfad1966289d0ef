"""HTTP quoting service."""
