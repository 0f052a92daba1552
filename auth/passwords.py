"""
auth/passwords.py -- bcrypt password hashing.

The cost factor is fixed at 10 rounds. Both functions are CPU-bound;
routes that call them are plain `def` handlers so FastAPI runs them on its
thread pool instead of the event loop.
"""

from __future__ import annotations

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    bcrypt 5 raises ValueError for passwords longer than 72 bytes. The API caps
    passwords at 72 characters, so only multi-byte input can reach that.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
