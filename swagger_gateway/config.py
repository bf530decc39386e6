from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Swagger Gateway"
    DEBUG: bool = False

    # Schema
    SCHEMA_PATH: str = "config/schema.yaml"

    # Backend
    BACKEND_HOST: str = ""
    BACKEND_SCHEME: str = ""
    BACKEND_TIMEOUT_SECONDS: float = 30.0
    STREAM_UNVALIDATED_RESPONSES: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

@lru_cache()
def get_settings() -> Settings:
    return Settings()
