"""StudyMate web application (FastAPI + SQLModel)."""
