"""HTTP-facing value types."""
