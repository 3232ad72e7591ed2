"""
Adapter: password hashing.

Implements the PasswordHasher port with passlib.
"""

from typing import Optional

from passlib.context import CryptContext

from app.domain.access.ports import PasswordHasher


class PasslibPasswordHasher(PasswordHasher):
    """Salted PBKDF2-SHA256 hashes through a passlib CryptContext.

    ``deprecated="auto"`` keeps old hashes verifiable if the scheme list
    changes later.
    """

    def __init__(self, rounds: Optional[int] = None) -> None:
        options = {"pbkdf2_sha256__rounds": rounds} if rounds else {}
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"], deprecated="auto", **options
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._context.verify(password, password_hash)
        except ValueError:
            # Unrecognized or malformed stored hash.
            return False
