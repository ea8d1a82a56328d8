from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    API_BASE_URL: str = "http://localhost:5000/api"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    DATA_DIR: str = "./data"

    SLOT_MINUTES: int = 30
    DEFAULT_VIEW: str = "week"  # "month" | "week" | "day"
    CONTEXT_MENU_OFFSET_Y: int = 50
    ENFORCE_END_AFTER_START: bool = False


settings = Settings()
