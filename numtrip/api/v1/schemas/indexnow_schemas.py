"""Schemas for the IndexNow endpoints (documentation only; bodies are parsed by hand)."""
from typing import List

from pydantic import BaseModel


class IndexNowRequest(BaseModel):
    urls: List[str]


class IndexNowSubmitResponse(BaseModel):
    success: bool
    message: str
    urls: List[str]


class IndexNowStatus(BaseModel):
    configured: bool
    keyFile: str


class IndexNowError(BaseModel):
    error: str
