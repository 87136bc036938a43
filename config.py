"""
Application settings.

Values come from the process environment and a local .env file, gathered
into one Settings object so collaborators such as the token signer receive
their configuration explicitly instead of reading globals.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: Optional[str] = None
    database_name: Optional[str] = None

    # Auth
    jwt_secret: str = "dev_secret_change_me"
    jwt_algorithm: str = "HS256"
    token_expire_seconds: int = 360000  # 100 hours
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Comma separated list of allowed origins
    cors_origins: str = "*"
    log_level: str = "INFO"
    env: str = "development"
    port: int = 8000

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
