from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorObject(BaseModel):
    status: str
    title: str
    detail: Optional[str] = None


class ErrorMeta(BaseModel):
    request_id: str


class ErrorDocument(BaseModel):
    """JSON:API top-level error document."""

    errors: List[ErrorObject] = Field(default_factory=list)
    meta: Optional[ErrorMeta] = None
