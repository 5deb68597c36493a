"""Credential checks for the login endpoint."""

import structlog

from identity.user.passwords import verify_password
from identity.user.registration import find_user_by_email

logger = structlog.get_logger(__name__)


def authenticate(email, password):
    """Return the user owning ``email`` when ``password`` matches, else ``None``."""
    user = find_user_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed", email=email)
        return None
    return user
