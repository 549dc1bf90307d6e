import secrets

import bcrypt

from academy.core.config import BCRYPT_ROUNDS

# bcrypt only reads the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def check_password_bytes(password: str) -> str:
    """Reject passwords longer than bcrypt accepts, counted in UTF-8 bytes."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time bcrypt comparison. Malformed hashes or oversized input never match."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def generate_password() -> str:
    return secrets.token_urlsafe(12)


# Compared against when the email is unknown, so a missing account costs
# roughly the same as a wrong password.
DUMMY_PASSWORD_HASH = hash_password(secrets.token_urlsafe(16))
