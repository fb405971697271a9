"""
Credential hasher - bcrypt implementation of the CredentialHasher port.

Passwords and verification tokens are both treated as opaque secrets.

bcrypt only reads the first 72 bytes of its input, so secrets are first
digested with SHA-256 and base64-encoded (44 ASCII bytes, never NUL).
Two secrets therefore only share a hash if their SHA-256 digests collide.
"""

import base64
import hashlib

import bcrypt

from .exceptions import HashingError


class BcryptHasher:
    """
    Implements CredentialHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        """
        Initialize hasher with a bcrypt work factor.

        Args:
            cost: bcrypt log2 rounds (4-31)
        """
        if not 4 <= cost <= 31:
            raise ValueError(f"bcrypt cost must be between 4 and 31, got {cost}")
        self._cost = cost

    @property
    def cost(self) -> int:
        return self._cost

    def hash(self, secret: str | bytes) -> str:
        """Return a salted bcrypt hash of the secret."""
        try:
            return bcrypt.hashpw(_prepare(secret), bcrypt.gensalt(rounds=self._cost)).decode()
        except ValueError as e:
            raise HashingError("bcrypt hashing failed") from e

    def verify(self, secret: str | bytes, hashed: str) -> bool:
        """
        Check a secret against a stored hash.

        bcrypt.checkpw compares in constant time.

        Raises:
            HashingError: If the stored hash is malformed
        """
        try:
            return bcrypt.checkpw(_prepare(secret), hashed.encode())
        except ValueError as e:
            raise HashingError("stored hash is not a valid bcrypt hash") from e


def _prepare(secret: str | bytes) -> bytes:
    if isinstance(secret, str):
        # JSON input may carry lone surrogates; they must hash, not raise
        secret = secret.encode("utf-8", "surrogatepass")
    return base64.b64encode(hashlib.sha256(secret).digest())
