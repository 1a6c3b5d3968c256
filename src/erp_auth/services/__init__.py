"""Adapters for the external credential store and session cache."""

from erp_auth.services.credential_store import CredentialStore, IssuedSession
from erp_auth.services.session_cache import (
    ALL_USERS_KEY,
    PENDING_USERS_KEY,
    SessionCache,
    user_key,
)

__all__ = [
    "ALL_USERS_KEY",
    "CredentialStore",
    "IssuedSession",
    "PENDING_USERS_KEY",
    "SessionCache",
    "user_key",
]
