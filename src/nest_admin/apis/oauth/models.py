from pydantic import BaseModel, Field

from nest_admin.apis.models import AdminPrincipal


class MeResponse(BaseModel):
    """Current session principal, or null when not logged in."""

    user: AdminPrincipal | None = Field(
        default=None,
        description="Authenticated admin, null for anonymous sessions"
    )


class LogoutResponse(BaseModel):
    success: bool = True
