"""Server — configuration, database and the FastAPI app (server.main)."""
