"""Per-request authentication and role checks."""

from dataclasses import dataclass
from enum import Enum

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gac.auth.tokens import decode_access_token
from gac.errors import AuthenticationError, AuthorizationError
from gac.logging_config import get_logger

logger = get_logger(__name__)

# auto_error=False: a missing header must not short-circuit method routing
security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    """Caller roles."""
    ADMIN = "admin"    # All operations, including deletes and type management
    STAFF = "staff"    # Create/update referrers
    USER = "user"      # Read-only


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""
    subject: str
    role: Role


class AccessGate:
    """Answers who the caller is and what they may do."""

    def __init__(self, principal: Principal | None = None):
        self.principal = principal

    def is_authenticated(self) -> bool:
        return self.principal is not None

    def is_staff(self) -> bool:
        """Staff or admin."""
        return self.is_authenticated() and self.principal.role in (Role.STAFF, Role.ADMIN)

    def is_admin(self) -> bool:
        return self.is_authenticated() and self.principal.role == Role.ADMIN

    def require_authenticated(self) -> Principal:
        """Raise 401 unless the caller is authenticated."""
        if not self.is_authenticated():
            raise AuthenticationError("Authentication required")
        return self.principal

    def require_staff(self, message: str) -> Principal:
        """Raise 401, then 403, unless the caller is staff or admin."""
        principal = self.require_authenticated()
        if not self.is_staff():
            logger.info("access_denied", subject=principal.subject, role=principal.role.value, required="staff")
            raise AuthorizationError(message)
        return principal

    def require_admin(self, message: str) -> Principal:
        """Raise 401, then 403, unless the caller is admin."""
        principal = self.require_authenticated()
        if not self.is_admin():
            logger.info("access_denied", subject=principal.subject, role=principal.role.value, required="admin")
            raise AuthorizationError(message)
        return principal


def get_access_gate(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AccessGate:
    """Build the access gate from the bearer token, if any."""
    if not credentials:
        return AccessGate()

    payload = decode_access_token(credentials.credentials)
    if not payload:
        return AccessGate()

    subject = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        logger.warning("token_unknown_role", subject=subject, role=payload.get("role"))
        return AccessGate()

    if not subject:
        return AccessGate()

    return AccessGate(Principal(subject=subject, role=role))
