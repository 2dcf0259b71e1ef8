# Meeting room reservation service (FastAPI + SQLModel, in-memory store)
__version__ = "0.1.0"
