from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings of the members client, read from LA_* environment variables."""
    API_URL: str = "http://127.0.0.1:5000/api"
    TOKEN_FILE: Path = Path.home() / ".legislative_assembly" / "admin_token"
    REQUEST_TIMEOUT: float = 10.0
    SEARCH_DEBOUNCE_SECONDS: float = 0.5

    model_config = SettingsConfigDict(env_prefix="LA_", env_file=".env", extra="ignore")
