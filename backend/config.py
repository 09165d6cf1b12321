from pathlib import Path

from pydantic_settings import BaseSettings


def _load_version() -> str:
    version_path = Path(__file__).resolve().parent / "VERSION"
    try:
        return version_path.read_text().strip()
    except FileNotFoundError:
        return "0.1.0"


class Settings(BaseSettings):
    """Application configuration using Pydantic settings."""

    # Database
    DATABASE_URL: str = "sqlite:///./data/chirpy.db"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:8080", "http://127.0.0.1:8080"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Application
    APP_NAME: str = "Chirpy"
    APP_VERSION: str = _load_version()
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # "dev" unlocks destructive admin endpoints (POST /admin/reset)
    PLATFORM: str = "prod"

    # Static files served under /app/
    FILESERVER_ROOT: str = str(Path(__file__).resolve().parent / "app")

    # Chirps
    MAX_CHIRP_LENGTH: int = 140

    # ── Authentication ─────────────────────────────────────────────────
    # JWT (HS256 only)
    CHIRPY_SECRET: str = "change-me-in-production"
    JWT_ISSUER: str = "chirpy"
    JWT_DEFAULT_EXPIRY_SECONDS: int = 3600

    # bcrypt log-rounds for new credentials
    BCRYPT_COST: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
