"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings

from namerec.oino import Dialect

BASE_DIR = Path(__file__).resolve().parents[1]
ENV_FILE = BASE_DIR / '.env'
DEFAULT_CORS_ALLOWED_ORIGINS = ['*']


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str  # Required
    dialect: Dialect = Dialect.SQLITE
    database: str = ''
    tables: list[str] = []  # Served as /api/{table}
    hashid_key: str = ''  # 32 hex characters; empty disables hashids
    log_level: str = 'INFO'
    library_log_level: str | None = None  # Level of the namerec.oino loggers; DEBUG logs generated SQL
    debug_mode: bool = False
    cors_allowed_origins: list[str] = DEFAULT_CORS_ALLOWED_ORIGINS

    class Config:
        """Pydantic settings configuration."""

        env_file = str(ENV_FILE)
        env_file_encoding = 'utf-8'
        case_sensitive = False


settings = Settings()
