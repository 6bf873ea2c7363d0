"""
Password hashing.

bcrypt is CPU bound, so both calls run in a worker thread and are awaited;
``bcrypt.checkpw`` performs a constant-time comparison.
"""

import asyncio

import bcrypt


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False


async def hash_password(password: str, rounds: int = 10) -> str:
    return await asyncio.to_thread(_hash, password, rounds)


async def verify_password(password: str, hashed: str) -> bool:
    return await asyncio.to_thread(_check, password, hashed)
