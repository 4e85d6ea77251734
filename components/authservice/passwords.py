from __future__ import annotations
import hashlib
import hmac
import secrets

_SCHEME = "pbkdf2_sha256"


class PasswordHasher:
    """
    Salted PBKDF2-SHA256 with a fixed work factor.
    Digests are self-describing: pbkdf2_sha256$<iterations>$<salt>$<hex>.
    """
    def __init__(self, iterations: int = 600_000):
        self.iterations = iterations

    def hash(self, password: str) -> str:
        salt = secrets.token_hex(16)
        dk = self._derive(password, salt, self.iterations)
        return f"{_SCHEME}${self.iterations}${salt}${dk}"

    def verify(self, password: str, encoded: str) -> bool:
        try:
            scheme, iters_s, salt, hex_dk = encoded.split("$")
            iterations = int(iters_s)
        except (AttributeError, ValueError):
            return False
        if scheme != _SCHEME or iterations <= 0 or not salt:
            return False
        return hmac.compare_digest(self._derive(password, salt, iterations).encode(), hex_dk.encode())

    @staticmethod
    def _derive(password: str, salt: str, iterations: int) -> str:
        return hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations, dklen=32).hex()
