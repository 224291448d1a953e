from pydantic import BaseModel, Field

from nest_admin.constants import ServerStatus


class ServerStatusResponse(BaseModel):
    """Liveness summary of the game server as seen from its world database."""

    status: ServerStatus = Field(examples=["running", "database_unreachable"])
    onlinePlayers: int = Field(ge=0)
    uptime: float = Field(ge=0, description="Seconds since this API process started")
