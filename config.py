from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    telegram_bot_token: str = ""
    api_base_url: str = "https://api.xrpl.to/v1"
    poll_interval_ms: int = 3000
    request_timeout: float = 60.0
    session_dir: str = ".sessions"
    min_amm_xrp: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
