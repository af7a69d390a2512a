# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# One place that reads every knob of the plant care backend (where the database lives,
# which bucket holds photos, how many plants a user may keep) from the environment.
#
# 🧪 Purpose (Technical Summary):
# pydantic-settings model loaded from environment variables and an optional .env file.
# Values are validated at startup so a bad deployment fails before serving traffic;
# comma separated settings are exposed as parsed lists through properties.
#
# 🔗 Dependencies:
# - pydantic-settings (BaseSettings, .env loading)
# - pydantic (Field, field_validator)
#
# 🔄 Connected Modules / Calls From:
# - app.main (server, middleware, background sweeps)
# - app.shared.config.database / supabase
# - app.shared.infrastructure.storage.object_store
# - Plant and upload services (quotas)

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = ("development", "staging", "production", "test")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
RATE_LIMIT_PERIODS = ("second", "minute", "hour", "day")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Runtime configuration of the Plant Care API.

    Every field maps to an environment variable of the same name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION
    # =========================================================================

    APP_NAME: str = "Plant Care API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = "Personal plant care tracking backend"
    ENVIRONMENT: str = Field(default="development", description=f"One of {', '.join(ENVIRONMENTS)}")
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="json for aggregators, text for terminals")

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False
    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for one database round trip made while serving a request"
    )

    ENABLE_SWAGGER_UI: bool = True
    ENABLE_REDOC: bool = True

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma separated browser origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = True

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    # Identity provider; only used to verify bearer tokens
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy async URL; overrides the DB_* parts below"
    )
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "plantcare_db"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    S3_ENDPOINT_URL: Optional[str] = Field(
        default=None,
        description="Custom endpoint for S3 compatible stores (Supabase storage, MinIO, R2)"
    )
    S3_REGION: str = "us-east-1"
    S3_BUCKET: str = "plant-photos"
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    PRESIGN_EXPIRY_SECONDS: int = Field(default=3600, gt=0)

    # =========================================================================
    # QUOTAS
    # =========================================================================

    MAX_PLANTS_PER_USER: int = Field(default=200, gt=0)
    MAX_UPLOADS_PER_USER: int = Field(default=20, gt=0)
    MAX_UPLOAD_BYTES: int = Field(default=2 * 1024 * 1024, gt=0, description="2MB per image")
    ALLOWED_IMAGE_CONTENT_TYPES: str = "image/jpeg,image/png,image/webp,image/gif,image/heic,image/heif"

    # =========================================================================
    # BACKGROUND WORK
    # =========================================================================

    ORPHAN_CLEANUP_ENABLED: bool = True
    ORPHAN_CLEANUP_INTERVAL_SECONDS: int = Field(default=1800, gt=0)
    ORPHAN_CLEANUP_BUDGET_SECONDS: int = Field(default=300, gt=0)
    ORPHAN_RETENTION_SECONDS: int = Field(
        default=3600,
        description="Unreferenced uploads younger than this are never swept"
    )

    USER_RATE_LIMIT: str = Field(default="100/minute", description="<limit>/<period>")
    IP_RATE_LIMIT: str = Field(default="1000/minute", description="<limit>/<period>")
    RATE_LIMIT_EVICTION_SECONDS: int = Field(default=300, gt=0)
    RATE_LIMIT_IDLE_SECONDS: int = 600

    STATS_CACHE_TTL_SECONDS: int = 300

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT", "LOG_FORMAT")
    @classmethod
    def normalize_lowercase(cls, v: str, info: ValidationInfo) -> str:
        allowed = ENVIRONMENTS if info.field_name == "ENVIRONMENT" else ("json", "text")
        if v.lower() not in allowed:
            raise ValueError(f"{info.field_name} must be one of {list(allowed)}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(LOG_LEVELS)}")
        return v.upper()

    @field_validator("CORS_ORIGINS")
    @classmethod
    def check_cors_origins(cls, v: str) -> str:
        bad = [origin for origin in _split_csv(v) if not origin.startswith(("http://", "https://", "*"))]
        if bad:
            raise ValueError(f"Invalid CORS origin(s): {', '.join(bad)}")
        return v

    @field_validator("USER_RATE_LIMIT", "IP_RATE_LIMIT")
    @classmethod
    def check_rate_limit(cls, v: str) -> str:
        """
        Shape check only; app.shared.core.rate_limiter does the real parsing.
        A trailing plural ("hours") is accepted there too.
        """
        count, _, period = v.partition("/")
        if not count.strip().isdigit() or period.strip().lower().rstrip("s") not in RATE_LIMIT_PERIODS:
            raise ValueError(f"Invalid rate limit: {v!r}, expected '<limit>/<period>'")
        return v

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.CORS_ORIGINS)

    @property
    def allowed_image_content_types(self) -> List[str]:
        """Accepted upload MIME types, lowercased."""
        return [content_type.lower() for content_type in _split_csv(self.ALLOWED_IMAGE_CONTENT_TYPES)]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "test"


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings()
