"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from user_service.domain.users.repositories import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted adaptive hashing; the work factor lives in ``method`` (``scrypt:N:r:p``, ``pbkdf2:sha256:iterations``)."""

    def __init__(self, method: str = "scrypt:32768:8:1", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length
        # werkzeug expands short methods ("scrypt", "pbkdf2:sha256") in the stored prefix
        self._stored_method = generate_password_hash("", method=method, salt_length=salt_length).split("$", 1)[0]

    def hash(self, password: str) -> str:
        return str(generate_password_hash(password, method=self._method, salt_length=self._salt_length))

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        stored_method = hashed.split("$", 1)[0]
        return stored_method != self._stored_method
