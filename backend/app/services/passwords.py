"""
Password hashing with bcrypt via pwdlib.

bcrypt is adaptive: the cost factor (rounds) doubles the work per step, so
stored hashes stay expensive to brute-force offline. The plaintext never
leaves this module in any form other than its hash.
"""

from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher

from app.config import BCRYPT_ROUNDS


class PasswordHasher:
    """Salted bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds
        self._hash = PasswordHash((BcryptHasher(rounds=rounds),))

    def hash(self, password: str) -> str:
        return self._hash.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        return self._hash.verify(password, hashed)
