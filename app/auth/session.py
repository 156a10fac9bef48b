# =============================================================================
# app/auth/session.py - Admin Session Flag
# =============================================================================
# The admin area is guarded by one hardcoded credential pair. Signing in
# sets a boolean held in process memory: there is no token, no expiry, and
# the flag is lost on restart.
# =============================================================================

import hmac
import logging

from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class AdminSession:
    """
    In-memory admin sign-in state.

    Example:
        session = AdminSession("admin@acfruit.com", "secret")
        session.sign_in("admin@acfruit.com", "secret")
        assert session.authenticated
        session.sign_out()
    """

    def __init__(self, email: str, password: str):
        self._email = email
        self._password = password
        self.authenticated = False

    def sign_in(self, email: str, password: str) -> None:
        """
        Raises:
            AuthenticationError: If the credentials do not match
        """
        email_ok = hmac.compare_digest(email.encode(), self._email.encode())
        password_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (email_ok and password_ok):
            logger.warning("Admin sign-in rejected")
            raise AuthenticationError()

        self.authenticated = True
        logger.info("Admin signed in")

    def sign_out(self) -> None:
        self.authenticated = False
        logger.info("Admin signed out")
