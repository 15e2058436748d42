"""Web API for the coaching dashboard (FastAPI)."""
