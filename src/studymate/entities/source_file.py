"""Raw file handed to the ingestion pipeline."""

from pathlib import Path

from pydantic import BaseModel, Field


class SourceFile(BaseModel):
    """A user-selected file: name, bytes and declared MIME type."""

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename).suffix.lower()
