# app/core/config.py
from functools import lru_cache
from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    env: str = "dev"
    database_url: str
    supabase_project_url: str
    supabase_jwks_url: str | None = None
    supabase_jwt_secret: str
    supabase_jwt_audience: str = "authenticated"
    session_cookie_name: str = "sb-access-token"
    api_key_prefix: str = "sk_"
    cors_origins: str = "*"
    log_level: str = "INFO"

    # Busca primero en variables de entorno y luego en .env
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        url = self.database_url
        if url.startswith("postgres://"):
            self.database_url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            self.database_url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        self.supabase_project_url = self.supabase_project_url.rstrip("/")
        if not self.supabase_jwks_url:
            self.supabase_jwks_url = f"{self.supabase_project_url}/auth/v1/.well-known/jwks.json"
        return self

    @property
    def jwt_issuer(self) -> str:
        return f"{self.supabase_project_url}/auth/v1"

    def get_cors_origins(self) -> list[str]:
        return [o.strip().rstrip("/") for o in self.cors_origins.split(",") if o.strip()]

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
