from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./sangraha.db"

    # Tokens are issued by the auth service; we only verify them
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Rate limiting is skipped when no Redis is configured
    REDIS_URL: str | None = None

    KAFKA_BOOTSTRAP_SERVERS: str = "kafka:9092"
    KAFKA_BOOKING_TOPIC: str = "booking_events"
    OUTBOX_ENABLED: bool = True

    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
