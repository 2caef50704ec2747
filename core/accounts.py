"""In-memory user accounts with hashed passwords."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from core.notifications import is_valid_email

LOGGER = logging.getLogger("infinytix.accounts")

MIN_PASSWORD_LENGTH = 6


class RegistrationError(ValueError):
    """Raised when sign-up details are rejected."""


class AuthenticationError(ValueError):
    """Raised when an email/password pair does not match an account."""


@dataclass(eq=False)
class User(UserMixin):
    id: str
    full_name: str
    email: str
    password_hash: str

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class UserStore:
    """Thread-safe registry of accounts keyed by lowercase email."""

    def __init__(self) -> None:
        self._by_id: dict[str, User] = {}
        self._by_email: dict[str, User] = {}
        self._lock = threading.Lock()

    def register(self, full_name: str | None, email: str | None, password: str | None) -> User:
        """
        Create an account.

        Raises:
            RegistrationError: With the first failed form rule, or when the
                email is already registered.
        """
        full_name = (full_name or "").strip()
        email = normalize_email(email)
        password = password or ""

        if not full_name:
            raise RegistrationError("Full name is required")
        if not is_valid_email(email):
            raise RegistrationError("Invalid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = User(
            id=uuid.uuid4().hex,
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
        )
        with self._lock:
            if email in self._by_email:
                raise RegistrationError("An account with this email already exists.")
            self._by_id[user.id] = user
            self._by_email[email] = user

        LOGGER.info("Registered user %s", email)
        return user

    def authenticate(self, email: str | None, password: str | None) -> User:
        user = self.find_by_email(email)
        if user is None or not user.check_password(password or ""):
            LOGGER.info("Failed sign-in for %s", normalize_email(email))
            raise AuthenticationError("Invalid email or password.")
        return user

    def get(self, user_id: str) -> User | None:
        with self._lock:
            return self._by_id.get(user_id)

    def find_by_email(self, email: str | None) -> User | None:
        with self._lock:
            return self._by_email.get(normalize_email(email))

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)
