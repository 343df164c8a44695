"""Application settings loaded from the environment."""

from typing import Optional
from urllib.parse import quote

from croniter import croniter
from pydantic import PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from plangate.core.config.enums import Environment

_SIXTY_DAYS = 60 * 24 * 60 * 60


class Settings(BaseSettings):
    """Environment-driven settings.

    Every field can be overridden with an environment variable of the same
    name (or through a ``.env`` file in the working directory).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", case_sensitive=True)

    PROJECT_NAME: str = "plangate"
    ENVIRONMENT: Environment = Environment.LOCAL
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None

    # -- Postgres --
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "plangate"
    POSTGRES_PASSWORD: str = "plangate"
    POSTGRES_DB: str = "plangate"
    POSTGRES_SSLMODE: str = "prefer"
    DB_POOL_SIZE: int = 10
    DB_POOL_MAX_OVERFLOW: int = 20

    # -- Redis --
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # -- Temporal --
    TEMPORAL_ENABLED: bool = False
    TEMPORAL_HOST: str = "localhost"
    TEMPORAL_PORT: int = 7233
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "plangate-usage"
    TEMPORAL_GRACEFUL_SHUTDOWN_TIMEOUT: int = 30

    # -- Stripe --
    STRIPE_ENABLED: bool = False
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None

    # -- Plan price references --
    PLAN_PRICE_FREE: Optional[str] = None
    PLAN_PRICE_STARTER: Optional[str] = None
    PLAN_PRICE_GROWTH: Optional[str] = None
    PLAN_PRICE_ENTERPRISE: Optional[str] = None

    # -- Usage metering --
    USAGE_COUNTER_TTL_SECONDS: int = _SIXTY_DAYS
    USAGE_THRESHOLD_TTL_SECONDS: int = _SIXTY_DAYS
    PROCESSED_EVENT_RETENTION_HOURS: int = 72

    # -- Reconciliation --
    RECONCILIATION_TENANT_TIMEOUT_SECONDS: float = 60.0
    DAILY_SNAPSHOT_CRON: str = "0 0 * * *"
    MONTHLY_RESET_CRON: str = "0 0 1 * *"

    METRICS_PORT: int = 9102

    @field_validator("DAILY_SNAPSHOT_CRON", "MONTHLY_RESET_CRON")
    @classmethod
    def _validate_cron(cls, value: str) -> str:
        if not croniter.is_valid(value):
            raise ValueError(f"Invalid cron expression: {value}")
        return value

    @property
    def SQLALCHEMY_ASYNC_DATABASE_URI(self) -> str:
        """Async Postgres DSN for SQLAlchemy (asyncpg driver)."""
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_HOST,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )

    @property
    def redis_url(self) -> str:
        """Redis connection URL, with the password URL-encoded when present."""
        if self.REDIS_PASSWORD:
            encoded_pwd = quote(self.REDIS_PASSWORD, safe="")
            return f"redis://:{encoded_pwd}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def temporal_address(self) -> str:
        """Temporal frontend address (host:port)."""
        return f"{self.TEMPORAL_HOST}:{self.TEMPORAL_PORT}"

    @property
    def use_json_logs(self) -> bool:
        """JSON log lines everywhere except local development, unless overridden."""
        if self.LOG_JSON is not None:
            return self.LOG_JSON
        return self.ENVIRONMENT not in (Environment.LOCAL, Environment.TEST)
