"""
Authentication Service

Registers users, checks passwords and holds the single active session.
The ledger core never authenticates; it only receives the User this
service resolved.

Passwords are stored as salted PBKDF2-SHA256 digests, never in plain
text, and never logged.
"""

import hashlib
import hmac
import secrets
from typing import Optional

from finance_ledger.logs import get_logger
from finance_ledger.models.ledger import PasswordCredential, User, is_blank
from finance_ledger.models.results import Err, Ok, OperationResult
from finance_ledger.services.registry import UserRegistry


logger = get_logger(__name__)

PBKDF2_ITERATIONS = 200_000
CREDENTIALS_REQUIRED = "Login and password must be non-empty."


def hash_password(
    password: str,
    salt: Optional[bytes] = None,
    iterations: int = PBKDF2_ITERATIONS,
) -> PasswordCredential:
    """Derive a credential from a plain password (random salt if none given)."""
    if salt is None:
        salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return PasswordCredential(
        salt=salt.hex(),
        digest=digest.hex(),
        iterations=iterations,
    )


def verify_password(password: str, credential: PasswordCredential) -> bool:
    candidate = hash_password(
        password,
        salt=bytes.fromhex(credential.salt),
        iterations=credential.iterations,
    )
    return hmac.compare_digest(candidate.digest, credential.digest)


class AuthService:
    """
    Registration, login and the current session.

    Only one user is logged in at a time.
    """

    def __init__(self, registry: UserRegistry, iterations: int = PBKDF2_ITERATIONS):
        self._registry = registry
        self._iterations = iterations
        self._current: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._current

    def register(self, login: str, password: str) -> OperationResult:
        """Create a user with an empty ledger. Does not log them in."""
        if is_blank(login) or is_blank(password):
            return Err(reason=CREDENTIALS_REQUIRED)
        if self._registry.exists(login):
            logger.info("register_rejected", login=login, reason="exists")
            return Err(reason=f"User already exists: {login}")

        user = User(
            login=login,
            credential=hash_password(password, iterations=self._iterations),
        )
        self._registry.put(user)

        logger.info("user_registered", login=login)
        return Ok(message=f"User registered: {login}")

    def login(self, login: str, password: str) -> OperationResult:
        if is_blank(login) or is_blank(password):
            return Err(reason=CREDENTIALS_REQUIRED)

        user = self._registry.get(login)
        if user is None:
            logger.info("login_rejected", login=login, reason="unknown_user")
            return Err(reason=f"User not found: {login}")
        if not verify_password(password, user.credential):
            logger.info("login_rejected", login=login, reason="bad_password")
            return Err(reason="Invalid password.")

        self._current = user
        logger.info("user_logged_in", login=login)
        return Ok(message=f"Logged in as: {login}")

    def logout(self) -> None:
        if self._current is not None:
            logger.info("user_logged_out", login=self._current.login)
        self._current = None

