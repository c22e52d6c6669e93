"""
aadhaar_auth/core/context.py

Purpose: Per-application wiring

- Holds settings and every collaborator the handlers need
- Built once at startup and attached to the FastAPI app
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aadhaar_auth.core.config import Settings
from aadhaar_auth.db.mongo import MongoDatabase
from aadhaar_auth.services.credentials import CredentialService
from aadhaar_auth.services.tokens import TokenService
from aadhaar_auth.services.user_store import UserStore


@dataclass
class AppContext:
    settings: Settings
    users: UserStore
    credentials: CredentialService
    tokens: TokenService
    database: Optional[MongoDatabase] = None


def build_context(settings: Settings, database: MongoDatabase) -> AppContext:
    """
    Wires the services around a connected database.
    """
    return AppContext(
        settings=settings,
        users=UserStore(database.users),
        credentials=CredentialService(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenService(
            settings.JWT_SECRET,
            ttl=timedelta(seconds=settings.TOKEN_TTL_SECONDS),
            algorithm=settings.JWT_ALGORITHM,
        ),
        database=database,
    )
