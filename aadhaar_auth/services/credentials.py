"""
Password hashing and verification.

Uses bcrypt with a random salt per hash and a configurable work factor.
The bcrypt calls run in a worker thread so request handlers stay responsive.
"""

import asyncio

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


class CredentialService:
    """
    Hashes passwords on sign-up and checks them on login.

    Args:
        rounds: bcrypt work factor applied to new hashes.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        self._dummy_hash = hash_password("dummy-password", rounds)

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(hash_password, password, self.rounds)

    async def verify(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(verify_password, password, password_hash)

    async def burn(self, password: str) -> None:
        """Run a check against a throwaway hash when there is no user to compare with."""
        await self.verify(password, self._dummy_hash)
