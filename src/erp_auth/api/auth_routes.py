"""Routes under ``/api/auth``."""

from fastapi import APIRouter, status

from erp_auth.api.deps import AdminUser, BearerToken, Context, CurrentUser
from erp_auth.models.identity import Profile
from erp_auth.models.requests import (
    DataResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
    UserSummary,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _summary(profile: Profile, email: str) -> UserSummary:
    return UserSummary(
        id=profile.id,
        email=profile.email or email,
        full_name=profile.full_name,
        role=profile.role,
        approval_status=profile.effective_status.value,
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(request: SignupRequest, ctx: Context) -> SignupResponse:
    """Register an account. It cannot log in until an admin approves it."""
    profile = await ctx.approvals.signup(request)
    return SignupResponse(
        user=_summary(profile, request.email),
        message="Account created. An administrator must approve it before you can sign in.",
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, ctx: Context) -> LoginResponse:
    """Exchange email and password for a bearer token.

    Returns 401 for bad credentials and 403 with the approval status when
    the password is right but the account is not yet usable.
    """
    session, profile = await ctx.approvals.login(request)
    return LoginResponse(
        token=session.access_token,
        user=_summary(profile, session.identity.email or request.email),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(user: CurrentUser, token: BearerToken, ctx: Context) -> MessageResponse:
    await ctx.approvals.logout(user, token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser, ctx: Context) -> UserResponse:
    """Current user's profile projection (cached per user)."""
    return UserResponse(user=await ctx.approvals.current_user(user))


@router.get("/pending-users", response_model=DataResponse)
async def pending_users(admin: AdminUser, ctx: Context) -> DataResponse:
    return DataResponse(data=await ctx.approvals.pending_users())


@router.post("/approve-user/{user_id}", response_model=DataResponse)
async def approve_user(user_id: str, admin: AdminUser, ctx: Context) -> DataResponse:
    profile = await ctx.approvals.approve(admin, user_id)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="User approved successfully",
    )


@router.post("/reject-user/{user_id}", response_model=DataResponse)
async def reject_user(user_id: str, admin: AdminUser, ctx: Context) -> DataResponse:
    profile = await ctx.approvals.reject(admin, user_id)
    return DataResponse(
        data=profile.model_dump(mode="json"),
        message="User rejected",
    )
