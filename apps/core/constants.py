"""Centralized constants for the core app."""

# Deployment environments that expose the OpenAPI schema and Swagger UI
API_DOCS_ENVIRONMENTS = ["local", "develop"]

__all__ = [
    "API_DOCS_ENVIRONMENTS",
]
