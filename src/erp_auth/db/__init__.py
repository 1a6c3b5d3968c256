"""Database access for ERP Auth."""

from erp_auth.db.client import ProfileRepository

__all__ = ["ProfileRepository"]
