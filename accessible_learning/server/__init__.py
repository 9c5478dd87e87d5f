"""HTTP API package: FastAPI app for the platform and caption routes."""
