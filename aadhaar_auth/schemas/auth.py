"""
aadhaar_auth/schemas/auth.py

Purpose: Request and response bodies for the auth endpoints

- Required-field validation happens here, before any store call
- Password confirmation is checked by the sign-up handler, not the schema,
  so a mismatch gets its own message
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class SignupRequest(BaseModel):
    """
    Sign-up payload.
    """
    name: str = Field(..., min_length=1)
    aadhaar_number: str = Field(..., min_length=1)
    mcp_card_number: str = Field(..., min_length=1)
    mobile_number: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Asha Devi",
                "aadhaar_number": "123412341234",
                "mcp_card_number": "MCP-0042",
                "mobile_number": "9876543210",
                "email": "asha@example.com",
                "password": "s3cret",
                "confirm_password": "s3cret"
            }
        }
    }


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str
    token: str


class UserProfile(BaseModel):
    """
    A user as returned by /profile. Never carries the password hash.
    """
    id: str
    name: str
    aadhaar_number: str
    mcp_card_number: str
    mobile_number: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
