from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache

# HS256 needs a key of at least 256 bits.
MIN_SECRET_KEY_BYTES = 32


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = Field(...)
    sql_echo: bool = Field(default=False)

    # JWT
    jwt_secret_key: str = Field(...)
    jwt_issuer: str = Field(...)
    jwt_audience: str = Field(...)
    jwt_expiration_minutes: int = Field(..., gt=0)

    # HTTP
    cors_origins: list[str] = Field(default=["*"])
    https_redirect: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("jwt_secret_key")
    @classmethod
    def check_secret_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            raise ValueError(
                f"JWT secret key must be at least {MIN_SECRET_KEY_BYTES} bytes for HS256"
            )
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
