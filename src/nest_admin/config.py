from pydantic_settings import BaseSettings
from pydantic import field_validator


class ApiConfig(BaseSettings):
    # Application Configuration
    APP_TITLE: str = "Dragon Nest Admin API"
    API_ROUTER_PATH_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    # Browser client (CORS origin and post-login redirect base)
    CLIENT_URL: str = "http://localhost:3000"

    # Logical databases
    MEMBERSHIP_DATABASE_URL: str = "mssql+aioodbc://sa:@localhost:1433/DNMembership"
    WORLD_DATABASE_URL: str = "mssql+aioodbc://sa:@localhost:1433/DNWorld"
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT_SECONDS: float = 30.0
    DB_QUERY_TIMEOUT_SECONDS: float = 15.0

    # Session cookie
    SESSION_SECRET: str = "dragon-nest-admin-secret"
    SESSION_COOKIE_NAME: str = "nest_admin_session"
    SESSION_TTL_SECONDS: int = 24 * 60 * 60

    # Comma separated admin emails; empty admits every authenticated identity
    ALLOWED_ADMINS: str = ""

    # Google OAuth
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_CALLBACK_URL: str = "http://localhost:4000/auth/google/callback"

    # Discord OAuth
    DISCORD_CLIENT_ID: str = ""
    DISCORD_CLIENT_SECRET: str = ""
    DISCORD_CALLBACK_URL: str = "http://localhost:4000/auth/discord/callback"

    OAUTH_TIMEOUT_SECONDS: float = 10.0
    VERIFY_SSL: bool = True

    # Pagination
    MAX_PAGE_LIMIT: int = 200

    @field_validator("VERIFY_SSL", mode="before")
    def convert_verify_ssl(cls, value):
        if isinstance(value, str):
            if value.lower() == "true":
                return True
            elif value.lower() == "false":
                return False
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        case_sensitive = True
        extra = "allow"


app_cfg = ApiConfig(_env_file=".env")
