"""Upload schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
    path: str
    bucket: str
