from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator

# Used only outside production when SECRET_KEY is unset; startup logs a warning.
DEV_SECRET_KEY = "dev-only-insecure-signing-key-set-SECRET_KEY"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Solace Hotel API"
    API_PREFIX: str = "/api/v1"
    # Comma-separated origins for CORS (e.g. https://solace-hotel.netlify.app). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""
    LOG_LEVEL: str = "INFO"

    SECRET_KEY: str = ""
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    REFRESH_COOKIE_NAME: str = "refreshToken"

    DATABASE_URL: str = "sqlite:///./hotel.db"
    DB_STATEMENT_TIMEOUT_MS: int = 5000
    DB_CONNECT_TIMEOUT_S: int = 5
    DB_POOL_TIMEOUT_S: int = 10

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v

    REDIS_URL: str = "redis://localhost:6379/0"

    # Both must be set for the seed to create an admin account.
    SEED_ADMIN_EMAIL: str = ""
    SEED_ADMIN_PASSWORD: str = ""

    DEV_SECRET_IN_USE: bool = False

    @model_validator(mode="after")
    def require_secret_key(self):
        if self.SECRET_KEY:
            return self
        if self.is_production:
            raise ValueError("SECRET_KEY must be set when ENV=production")
        self.SECRET_KEY = DEV_SECRET_KEY
        self.DEV_SECRET_IN_USE = True
        return self

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() in ("production", "prod")

    @property
    def refresh_cookie_path(self) -> str:
        return f"{self.API_PREFIX}/auth/refresh-token"


settings = Settings()
