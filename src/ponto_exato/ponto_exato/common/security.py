from __future__ import annotations

import hashlib
import secrets
import string
import uuid

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """Salted credential hashing (werkzeug scrypt/pbkdf2 formats)."""

    def hash(self, password: str) -> str:
        return generate_password_hash(password)

    def verify(self, password_hash: str | None, password: str) -> bool:
        if not password_hash:
            return False
        try:
            return check_password_hash(password_hash, password)
        except (ValueError, TypeError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            return False


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


def generate_access_code(length: int) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def sign_punch(*parts: object) -> str:
    """Short digest binding a punch to its identifying fields."""
    payload = "|".join("" if p is None else str(p) for p in parts)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]
