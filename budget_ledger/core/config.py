from urllib.parse import urlparse

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    db_name: str = "budget_ledger"
    db_user: str = "ledger"
    db_password: str = "CHANGE_ME"
    db_host: str = "db"
    db_port: int = 5432
    db_ssl: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 5
    db_statement_timeout_ms: int = 30000
    # Full SQLAlchemy URL; takes precedence over the db_* parts when set
    database_url_override: str = ""

    # CORS
    cors_allowed_origins: str = "http://localhost:3000"

    # App
    debug: bool = False
    log_level: str = "INFO"
    app_version: str = "dev"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        base = (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )
        return f"{base}?ssl=require" if self.db_ssl else base

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "extra": "ignore"}

    def validate_secrets(self) -> None:
        """Raise if the database credentials are still defaults outside debug mode."""
        if self.debug or self.database_url_override:
            return
        if self.db_password == "CHANGE_ME":
            raise ValueError("db_password must be changed from default")
        for origin in self.cors_origins_list:
            parsed = urlparse(origin)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"Invalid CORS origin: {origin!r}")


settings = Settings()
