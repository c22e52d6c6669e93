from pydantic import BaseModel
from typing import Optional, Any


class MessageResponse(BaseModel):
    """
    Standard response body: a single human-readable message.
    """
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    message: str
    details: Optional[Any] = None

    def body(self) -> dict:
        return self.model_dump(exclude_none=True)
