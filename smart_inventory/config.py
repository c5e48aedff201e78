from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "SmartInventory"
    DATABASE_URL: str = "sqlite:///./inventory.db"

    LOG_LEVEL: str = "INFO"

    # Report exports land here
    EXPORT_DIR: str = "./exports"

    # Display currency for money columns in HTML reports
    DEFAULT_CURRENCY: str = "USD"

    # Used when a count is recorded without an identified user
    DEFAULT_COUNTED_BY: str = "User"

    # Completion events: callback URLs (comma-separated) and in-memory log size
    EVENT_WEBHOOK_URLS: str = ""
    EVENT_LOG_SIZE: int = 200

    SEED_UNITS_ON_STARTUP: bool = True

    model_config = {"env_file": ".env"}


settings = Settings()
