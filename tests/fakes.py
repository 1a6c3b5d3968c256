"""In-memory stand-ins for Supabase and Redis used across the tests."""

from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any
from uuid import uuid4

from supabase_auth.errors import AuthApiError

from erp_auth.exceptions import ConflictError, InternalError
from erp_auth.models.identity import ApprovalStatus, Identity, Profile
from erp_auth.services.credential_store import IssuedSession

_clock = count()


def _timestamp() -> str:
    """Strictly increasing timestamps so ordering by created_at is stable."""
    base = datetime(2026, 1, 1, tzinfo=UTC)
    return (base + timedelta(seconds=next(_clock))).isoformat()


class FakeProfileRepository:
    """Dict-backed ``user_profiles`` table."""

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.fail_create = False
        self.healthy = True
        self.reads = 0

    async def get_profile(self, user_id: str, fields: str = "*") -> Profile | None:
        self.reads += 1
        row = self.rows.get(user_id)
        return Profile(**row) if row else None

    async def get_profile_by_email(self, email: str) -> Profile | None:
        for row in self.rows.values():
            if row.get("email") == email:
                return Profile(**row)
        return None

    async def list_profiles(
        self,
        status: ApprovalStatus | None = None,
    ) -> list[dict[str, Any]]:
        rows = [
            dict(row) for row in self.rows.values()
            if status is None or row.get("approval_status") == status.value
        ]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def create_profile(self, data: dict[str, Any]) -> Profile:
        if self.fail_create:
            raise InternalError("Failed to create user profile")
        row = {"created_at": _timestamp(), **data}
        self.rows[data["id"]] = row
        return Profile(**row)

    async def update_profile(
        self,
        user_id: str,
        data: dict[str, Any],
    ) -> Profile | None:
        row = self.rows.get(user_id)
        if row is None:
            return None
        row.update(data)
        return Profile(**row)

    async def record_login(self, user_id: str) -> None:
        self.rows[user_id]["last_login_at"] = datetime.now(UTC).isoformat()

    async def health_check(self) -> dict[str, Any]:
        return {
            "healthy": self.healthy,
            "latency_ms": 0.0,
            "error": None if self.healthy else "connection refused",
        }


class FakeCredentialStore:
    """Supabase Auth stand-in with opaque random tokens."""

    def __init__(self) -> None:
        self.users: dict[str, dict[str, str]] = {}
        self.tokens: dict[str, str] = {}
        self.revoked: list[str] = []
        self.deleted: list[str] = []
        self.created: list[str] = []
        self.fail_delete = False

    def add_user(self, email: str, password: str, user_id: str | None = None) -> str:
        user_id = user_id or str(uuid4())
        self.users[user_id] = {"email": email, "password": password}
        return user_id

    def issue_token(self, user_id: str) -> str:
        token = f"tok-{uuid4().hex}"
        self.tokens[token] = user_id
        return token

    def _identity(self, user_id: str) -> Identity:
        return Identity(id=user_id, email=self.users[user_id]["email"])

    async def verify_token(self, token: str) -> Identity | None:
        user_id = self.tokens.get(token)
        if user_id is None or user_id not in self.users:
            return None
        return self._identity(user_id)

    async def sign_in(self, email: str, password: str) -> IssuedSession | None:
        for user_id, user in self.users.items():
            if user["email"] == email and user["password"] == password:
                return IssuedSession(
                    identity=self._identity(user_id),
                    access_token=self.issue_token(user_id),
                )
        return None

    async def sign_out(self, token: str) -> None:
        self.revoked.append(token)
        self.tokens.pop(token, None)

    async def email_exists(self, email: str) -> bool:
        return any(user["email"] == email for user in self.users.values())

    async def create_identity(
        self,
        email: str,
        password: str,
        full_name: str | None = None,
    ) -> Identity:
        if await self.email_exists(email):
            raise ConflictError("User with this email already exists")
        user_id = self.add_user(email, password)
        self.created.append(user_id)
        return self._identity(user_id)

    async def delete_identity(self, user_id: str) -> None:
        if self.fail_delete:
            raise AuthApiError("User not found", 404, None)
        self.users.pop(user_id, None)
        self.deleted.append(user_id)


class FakeRedis:
    """The subset of ``redis.asyncio.Redis`` the session cache uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


def seed_user(
    repository: FakeProfileRepository,
    credentials: FakeCredentialStore,
    email: str,
    password: str = "secret1",
    *,
    role: str = "sales",
    approval_status: str | None = "approved",
    is_active: bool = True,
    full_name: str = "",
) -> tuple[str, str]:
    """Create an identity plus profile; return ``(user_id, token)``."""
    user_id = credentials.add_user(email, password)
    repository.rows[user_id] = {
        "id": user_id,
        "email": email,
        "phone": "",
        "full_name": full_name,
        "role": role,
        "is_active": is_active,
        "approval_status": approval_status,
        "created_at": _timestamp(),
    }
    return user_id, credentials.issue_token(user_id)
