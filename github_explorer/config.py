from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from GITHUB_EXPLORER_* environment variables or a .env file."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_EXPLORER_", env_file=".env", extra="ignore")

    app_name: str = "GitHub Explorer"

    # ===== GitHub =====
    api_url: str = "https://api.github.com"
    user_agent: str = "github-explorer"
    request_timeout: float = 60.0

    repositories_per_page: int = 20
    followers_per_page: int = 100
    search_per_page: int = 20

    # ===== Server =====
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
