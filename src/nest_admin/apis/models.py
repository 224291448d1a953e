from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class AdminPrincipal(BaseModel):
    """The authenticated admin attached to a session."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="User ID at the identity provider.",
        examples=["113620427151234567890", "80351110224678912"]
    )
    provider: Literal["google", "discord"] = Field(
        description="Identity provider that authenticated the admin."
    )
    email: str = Field(
        description="Email reported by the identity provider.",
        examples=["admin@example.com"]
    )
    displayName: str = Field(
        description="Display name (Google) or username (Discord)."
    )
    avatar: str | None = Field(
        default=None,
        description="Avatar image URL, if the provider has one."
    )


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    error: str = Field(examples=["Character not found"])
    details: str | None = Field(default=None, description="Diagnostic detail, e.g. the driver message")
