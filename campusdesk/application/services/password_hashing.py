"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from campusdesk.domain.users.exceptions import MalformedPasswordHashError
from campusdesk.domain.users.repositories import PasswordHasher

# scrypt with N=2**15, r=8, p=1; encoded into every hash as "method$salt$digest".
PASSWORD_HASH_METHOD = "scrypt:32768:8:1"
SALT_LENGTH = 16


class WerkzeugPasswordHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("password must not be empty")
        return str(
            generate_password_hash(password, method=PASSWORD_HASH_METHOD, salt_length=SALT_LENGTH)
        )

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed or hashed.count("$") < 2:
            raise MalformedPasswordHashError("password hash is not in method$salt$digest form")
        if not password:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError as exc:
            raise MalformedPasswordHashError(str(exc)) from exc
