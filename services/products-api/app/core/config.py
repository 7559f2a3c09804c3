from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration for products-api.

    Values come from the environment (or a local .env file). The database can be
    configured either with a full DATABASE_URL or with the DB_* pieces.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Service ---
    app_name: str = Field(default="products-api", validation_alias="APP_NAME")
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=4000, validation_alias="PORT")

    # --- CORS (Cross-Origin Resource Sharing) allowlist (CSV) ---
    cors_allowed_origins: str = Field(
        default="http://localhost:5173",
        validation_alias="CORS_ALLOWED_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=False, validation_alias="CORS_ALLOW_CREDENTIALS")

    def cors_origins_list(self) -> List[str]:
        return [x.strip() for x in self.cors_allowed_origins.split(",") if x.strip()]

    # -------------------------
    # Database
    # -------------------------
    # Opción A: URL completa (si se define, se usa tal cual).
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Opción B: piezas (recomendado para producción)
    db_dialect: str = Field(default="postgresql+psycopg", validation_alias="DB_DIALECT")
    db_host: str = Field(default="products-db", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="products_db", validation_alias="DB_NAME")
    db_user: str = Field(default="products_app", validation_alias="DB_USER")
    db_password: Optional[str] = Field(default=None, validation_alias="DB_PASSWORD")

    # Si es True, el arranque falla cuando la DB no responde; si es False, se sirve en modo degradado.
    db_required_on_startup: bool = Field(default=True, validation_alias="DB_REQUIRED_ON_STARTUP")

    @property
    def database_url_resolved(self) -> str:
        """
        Devuelve DATABASE_URL si viene definido; si no, lo construye desde DB_*.

        Nota: si DB_PASSWORD no viene definido, la URL se construye igualmente,
        pero la conexión puede fallar si Postgres exige contraseña (lo normal en prod).
        """
        if self.database_url and self.database_url.strip():
            return self.database_url.strip()

        pwd = self.db_password or ""
        return f"{self.db_dialect}://{self.db_user}:{pwd}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

