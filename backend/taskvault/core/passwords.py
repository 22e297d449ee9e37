"""Password Hashing — bcrypt work-factor hashing and constant-shape verification.

Invariants:
    - Hashes are produced with a caller-supplied cost (4-31 rounds)
    - Passwords longer than MAX_PASSWORD_BYTES are rejected at hash time;
      at verify time they simply never match
    - verify_against_dummy costs the same as a real mismatch at the same cost,
      so an unknown email cannot be told apart from a wrong password by timing

Design Decisions:
    - bcrypt called directly (no passlib): passlib is unmaintained and breaks on
      current bcrypt releases
    - Sync functions; callers offload to a worker thread (asyncio.to_thread)
"""

from functools import lru_cache

import bcrypt

from taskvault.core.errors import ValidationFailedError

MAX_PASSWORD_BYTES = 72
DEFAULT_HASH_ROUNDS = 10


def hash_password(password: str, rounds: int) -> str:
    raw = password.encode("utf-8")
    if not raw:
        raise ValidationFailedError("Password is required", field="password")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationFailedError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            field="password",
        )
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        # Still pay the hashing cost, then report a mismatch.
        bcrypt.checkpw(raw[:MAX_PASSWORD_BYTES], password_hash.encode("ascii"))
        return False
    return bcrypt.checkpw(raw, password_hash.encode("ascii"))


@lru_cache(maxsize=8)
def _dummy_hash(rounds: int) -> str:
    return hash_password("taskvault-dummy-password", rounds)


def verify_against_dummy(password: str, rounds: int) -> bool:
    """Run a full bcrypt comparison that can never succeed. Always False."""
    verify_password(password, _dummy_hash(rounds))
    return False
