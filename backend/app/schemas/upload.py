"""
Pydantic schemas for image uploads.
"""
from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    url: str
    message: str
    type: str | None = None


class DeleteFileRequest(BaseModel):
    url: str = Field(min_length=1)


class MessageResponse(BaseModel):
    message: str
