"""
Credential hashing with support for the legacy password format.

New credentials are hashed with bcrypt. Older records were stored as
base64(password + salt); those still verify so that existing admins can log
in, but they are never re-hashed automatically.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

import bcrypt

from library_desk.core.config import settings
from library_desk.core.exceptions import VerificationError

logger = logging.getLogger(__name__)

BCRYPT_MARKER = "$2"
# bcrypt only reads the first 72 bytes; newer releases raise instead of truncating.
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class LegacyHash:
    value: str


@dataclass(frozen=True)
class BcryptHash:
    value: str


CredentialHash = Union[LegacyHash, BcryptHash]


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def parse_stored_hash(raw: str) -> CredentialHash:
    """Decide the format of a stored hash once, where it is read from storage."""
    if raw.startswith(BCRYPT_MARKER):
        return BcryptHash(raw)
    return LegacyHash(raw)


class CredentialHasher:
    def __init__(self, legacy_salt: Optional[str] = None, rounds: Optional[int] = None) -> None:
        self.legacy_salt = settings.legacy_password_salt if legacy_salt is None else legacy_salt
        self.rounds = settings.bcrypt_rounds if rounds is None else rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(_bcrypt_input(password), salt)
        return hashed.decode("utf-8")

    def hash_legacy(self, password: str) -> str:
        """Legacy encoding. Only for producing fixtures and migrating old data."""
        return base64.b64encode((password + self.legacy_salt).encode("utf-8")).decode("ascii")

    def decode_legacy(self, stored: LegacyHash) -> str:
        try:
            return base64.b64decode(stored.value.encode("ascii"), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise VerificationError("Stored credential is not a valid legacy hash") from exc

    def verify(self, password: str, stored: Union[str, CredentialHash]) -> bool:
        """Check a password. Returns False rather than raising on any bad input."""
        try:
            if isinstance(stored, str):
                stored = parse_stored_hash(stored)
            if isinstance(stored, BcryptHash):
                try:
                    return bcrypt.checkpw(_bcrypt_input(password), stored.value.encode("utf-8"))
                except ValueError as exc:
                    # In case the stored hash is invalid/corrupted
                    raise VerificationError("Stored credential is not a valid bcrypt hash") from exc
            return self.decode_legacy(stored) == password + self.legacy_salt
        except VerificationError as exc:
            logger.warning("Password verification failed: %s", exc.message)
            return False
        except Exception:
            logger.exception("Unexpected error while verifying a password")
            return False

    def needs_rehash(self, stored: Union[str, CredentialHash]) -> bool:
        if isinstance(stored, str):
            stored = parse_stored_hash(stored)
        return isinstance(stored, LegacyHash)


_SPECIAL = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


@dataclass(frozen=True)
class PasswordStrength:
    score: int
    feedback: List[str] = field(default_factory=list)


def password_strength(password: str) -> PasswordStrength:
    """Score 0-4, one point per satisfied rule, with hints for the missing ones."""
    checks = [
        (len(password) >= 8, "Use at least 8 characters"),
        (re.search(r"[a-z]", password) is not None, "Include lowercase letters"),
        (re.search(r"[A-Z]", password) is not None, "Include uppercase letters"),
        (re.search(r"\d", password) is not None, "Include numbers"),
        (_SPECIAL.search(password) is not None, "Include special characters"),
    ]
    score = sum(1 for passed, _ in checks if passed)
    feedback = [hint for passed, hint in checks if not passed]
    return PasswordStrength(score=min(score, 4), feedback=feedback)
