"""Pydantic schemas for API response bodies."""

from pydantic import BaseModel


class CreateStreamResponse(BaseModel):
    """Response model for opening an upload stream."""
    stream: str


class UploadChunkResponse(BaseModel):
    """Response model for uploading one chunk."""
    success: bool


class FinishStreamResponse(BaseModel):
    """Response model for finalizing a stream into an artifact."""
    id: str


class RemoveStreamResponse(BaseModel):
    """Response model for discarding a stream."""
    success: bool


class LengthResponse(BaseModel):
    """Response model for the byte length of an artifact."""
    size: int
