"""Routes under ``/api/users``."""

from fastapi import APIRouter, status

from erp_auth.api.deps import AdminUser, Context, CurrentUser
from erp_auth.models.requests import (
    CreateUserRequest,
    DataResponse,
    ProfileUpdateRequest,
    RoleUpdateRequest,
    UserUpdateRequest,
)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=DataResponse)
async def list_users(admin: AdminUser, ctx: Context) -> DataResponse:
    return DataResponse(data=await ctx.users.list_users())


@router.post("", response_model=DataResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    admin: AdminUser,
    ctx: Context,
) -> DataResponse:
    """Create an already-approved user."""
    profile = await ctx.users.create_user(admin, request)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="User created successfully",
    )


@router.get("/{user_id}", response_model=DataResponse)
async def get_user(user_id: str, user: CurrentUser, ctx: Context) -> DataResponse:
    """A user may read their own profile; admins may read any."""
    profile = await ctx.users.get_user(user, user_id)
    return DataResponse(data=profile.model_dump(mode="json"))


@router.put("/{user_id}", response_model=DataResponse)
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    admin: AdminUser,
    ctx: Context,
) -> DataResponse:
    profile = await ctx.users.update_user(admin, user_id, request)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="User updated successfully",
    )


@router.put("/{user_id}/role", response_model=DataResponse)
async def update_role(
    user_id: str,
    request: RoleUpdateRequest,
    admin: AdminUser,
    ctx: Context,
) -> DataResponse:
    profile = await ctx.users.update_role(admin, user_id, request.role)
    return DataResponse(data=profile.model_dump(mode="json"))


@router.put("/{user_id}/profile", response_model=DataResponse)
async def update_profile(
    user_id: str,
    request: ProfileUpdateRequest,
    user: CurrentUser,
    ctx: Context,
) -> DataResponse:
    profile = await ctx.users.update_profile(user, user_id, request)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="Profile updated successfully",
    )


@router.put("/{user_id}/approve", response_model=DataResponse)
async def approve_user(user_id: str, admin: AdminUser, ctx: Context) -> DataResponse:
    """Same transition as ``POST /api/auth/approve-user/{id}``."""
    profile = await ctx.approvals.approve(admin, user_id)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="User approved successfully",
    )
