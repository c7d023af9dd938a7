"""REST API for justicechain."""
