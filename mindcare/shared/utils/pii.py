"""Pseudonymous user ids for log lines.

Risk user ids are ints and alert user ids are strings; both go through
hash_pii() so one user maps to the same token in every service's logs.
Message text and excerpts are never logged, hashed or not.
"""
import hashlib
import logging
from typing import Optional, Union

logger = logging.getLogger(__name__)

MIN_SALT_LENGTH = 32

_PII_SALT: Optional[str] = None


def configure_pii_salt(salt: str) -> None:
    """Set the process-wide salt; each Flask app calls this at import.

    Raises:
        ValueError: If the salt is shorter than MIN_SALT_LENGTH
    """
    global _PII_SALT
    if not salt or len(salt) < MIN_SALT_LENGTH:
        logger.critical("PII_SALT_REJECTED", extra={"min_length": MIN_SALT_LENGTH})
        raise ValueError(f"PII salt must be at least {MIN_SALT_LENGTH} characters")

    _PII_SALT = salt


def hash_pii(value: Union[str, int]) -> str:
    """Salted SHA-256 hex digest of a user identifier.

    42 and "42" hash alike.

    Raises:
        RuntimeError: If configure_pii_salt() has not run
    """
    if _PII_SALT is None:
        raise RuntimeError("PII salt not configured. Call configure_pii_salt() first.")

    return hashlib.sha256(f"{_PII_SALT}{value}".encode()).hexdigest()
