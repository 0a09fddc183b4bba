"""HTTP API for editing sessions and articles."""
