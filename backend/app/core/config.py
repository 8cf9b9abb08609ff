from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./jobboard.db"
    DATABASE_ECHO: bool = False

    # JWT Authentication
    JWT_ACCESS_SECRET: str = "access-secret-change-in-production"
    JWT_REFRESH_SECRET: str = "refresh-secret-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Password hashing
    BCRYPT_SALT_ROUNDS: int = 10

    # Scheduled sweeps
    SCHEDULER_ENABLED: bool = True
    TOKEN_RETENTION_DAYS: int = 30
    TOKEN_SWEEP_INTERVAL_SECONDS: int = 60 * 60 * 24
    JOB_SWEEP_INTERVAL_SECONDS: int = 60

    # Rate limiting (per client address, all routes)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Image storage
    STORAGE_DRIVER: str = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE_MB: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # Application
    APP_NAME: str = "Job Board API"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:3000,"
        "http://localhost:5173,"
        "http://127.0.0.1:3000,"
        "http://127.0.0.1:5173"
    )

    @property
    def cors_origins(self) -> list[str]:
        return [
            origin.strip()
            for origin in self.BACKEND_CORS_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def rate_limit(self) -> str:
        return f"{self.RATE_LIMIT_REQUESTS} per {self.RATE_LIMIT_WINDOW_SECONDS} second"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


settings = Settings()
