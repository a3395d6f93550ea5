from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    sql_echo: bool = Field(False, alias="SQL_ECHO")
    # Seconds before a pooled connection is replaced
    db_pool_recycle_seconds: int = Field(300, alias="DB_POOL_RECYCLE_SECONDS")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_issuer: str = Field("parlour-api", alias="JWT_ISSUER")
    jwt_audience: str = Field("parlour-dashboard", alias="JWT_AUDIENCE")
    access_token_expire_minutes: int = Field(24 * 60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Dashboard origin allowed by CORS
    client_url: str = Field("http://localhost:3000", alias="CLIENT_URL")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # How far in the future a caller-supplied punch timestamp may lie (clock skew of terminals)
    punch_future_tolerance_seconds: int = Field(300, alias="PUNCH_FUTURE_TOLERANCE_SECONDS")
    punch_append_attempts: int = Field(3, alias="PUNCH_APPEND_ATTEMPTS")
    # Per-connection limit for one realtime send
    broadcast_send_timeout_seconds: float = Field(5.0, alias="BROADCAST_SEND_TIMEOUT_SECONDS")

    seed_password: str = Field("password123", alias="SEED_PASSWORD")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
