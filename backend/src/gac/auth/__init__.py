"""Authentication for the GAC API - JWT bearer tokens with staff/admin roles."""

from gac.auth.gate import AccessGate, Principal, Role, get_access_gate
from gac.auth.tokens import create_access_token, decode_access_token

__all__ = [
    "AccessGate",
    "Principal",
    "Role",
    "create_access_token",
    "decode_access_token",
    "get_access_gate",
]
