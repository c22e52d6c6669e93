"""
aadhaar_auth/models/user.py

Purpose: User document model

- Identity fields (name, Aadhaar, MCP card, mobile, email)
- bcrypt password hash, never the plaintext
- created_at / updated_at timestamps stamped by the store
"""

from typing import Any, Dict

from aadhaar_auth.schemas.auth import SignupRequest, UserProfile

PASSWORD_FIELD = "password"


def new_user_document(request: SignupRequest, password_hash: str) -> Dict[str, Any]:
    """
    Builds the document to insert for a sign-up.

    Args:
        request: Validated sign-up payload
        password_hash: Hash of request.password

    Returns:
        User document without _id or timestamps
    """
    return {
        "name": request.name,
        "aadhaar_number": request.aadhaar_number,
        "mcp_card_number": request.mcp_card_number,
        "mobile_number": request.mobile_number,
        "email": request.email,
        PASSWORD_FIELD: password_hash,
    }


def to_profile(document: Dict[str, Any]) -> UserProfile:
    """
    Converts a stored user document into its public profile.
    """
    return UserProfile(
        id=str(document["_id"]),
        name=document["name"],
        aadhaar_number=document["aadhaar_number"],
        mcp_card_number=document["mcp_card_number"],
        mobile_number=document["mobile_number"],
        email=document["email"],
        created_at=document.get("created_at"),
        updated_at=document.get("updated_at"),
    )
