from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables or a .env file.

    Groups server options, the database connection, the admin phone number used to
    derive `is_admin`, and the limits/defaults of the study endpoints. Pydantic
    validates and coerces every value on start-up.
    """
    # Server
    BACKEND_PORT: int = 8000

    # Model configuration tells Pydantic where to find the .env file.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    PROJECT_NAME: str = "Wordbook"
    API_V1_STR: str = "/api/v1"

    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    DATABASE_URL: str = "sqlite:///./wordbook.db"

    # The owner of this phone number is the admin; empty means nobody is.
    ADMIN_PHONE: str = ""

    # Session word selector
    SESSION_WORDS_MIN_LIMIT: int = 1
    SESSION_WORDS_MAX_LIMIT: int = 200

    # Defaults for newly created learning settings
    DEFAULT_LEARN_SESSION_SIZE: int = 10
    DEFAULT_REVIEW_SESSION_SIZE: int = 10
    DEFAULT_SPEED_REVIEW_SESSION_SIZE: int = 15

    LOG_LEVEL: str = "INFO"

# Create a single, globally accessible instance of the settings.
settings = Settings()
