"""FastAPI application exposing the alert resource."""
