"""Simulated account emails. Nothing is delivered; messages go to the log."""

from __future__ import annotations

import logging
import re

LOGGER = logging.getLogger("infinytix.notifications")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
WELCOME_SUBJECT = "Welcome to Infinytix!"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match((email or "").strip()))


def send_welcome_email(full_name: str, email: str) -> str:
    """Log the welcome email a new user would receive and return a status line."""
    if not is_valid_email(email):
        raise ValueError(f"Invalid email address: {email!r}")

    body = (
        f"Hi {full_name},\n\n"
        "Thank you for creating an account with Infinytix.\n"
        "We're excited to have you on board!\n\n"
        "Best,\n"
        "The Infinytix Team"
    )
    LOGGER.info("Simulated welcome email | to=%s | subject=%s\n%s", email, WELCOME_SUBJECT, body)
    return f"Successfully sent a welcome email to {email}"


def send_password_reset_email(email: str) -> str:
    """Log a simulated password reset notice."""
    if not is_valid_email(email):
        raise ValueError(f"Invalid email address: {email!r}")
    LOGGER.info("Simulated password reset email | to=%s", email)
    return f"Password reset instructions sent to {email}"
