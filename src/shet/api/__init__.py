"""HTTP API for the SHET token."""
