"""
Password hashing utilities.

bcrypt with an explicit work factor; the account actions default to 10 rounds.
"""

import asyncio

import bcrypt

DEFAULT_ROUNDS = 10

# bcrypt only reads the first 72 bytes; bcrypt 5 raises on longer input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (log2 of the iteration count)

    Returns:
        Hashed password as string
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    Args:
        password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


async def hash_password_async(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password in a worker thread so the event loop keeps serving."""
    return await asyncio.to_thread(hash_password, password, rounds)


async def verify_password_async(password: str, hashed_password: str) -> bool:
    """Verify a password in a worker thread."""
    return await asyncio.to_thread(verify_password, password, hashed_password)
