from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Wocuum"
    ENVIRONMENT: str = "development"

    # Server
    PORT: int = 4000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Database
    DATABASE_URL: str = "sqlite:///./data/wocuum.db"

    # Sessions
    SESSION_SECRET: str = "dev-session-secret"
    SESSION_COOKIE_NAME: str = "wocuum.sid"
    SESSION_MAX_AGE_SECONDS: int = 24 * 60 * 60
    SESSION_CLEANUP_INTERVAL_SECONDS: int = 60 * 60

    # Registration is limited to a single account while the service runs
    # in demo mode. None lifts the limit.
    MAX_REGISTERED_USERS: Optional[int] = 1

    # Per-IP limits on failed register/login/reset/delete attempts
    RATE_LIMIT_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        return "strict" if self.is_production else "lax"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()


def get_settings() -> Settings:
    """Settings dependency, overridable in tests."""
    return settings
