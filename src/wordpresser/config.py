"""Application settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """WordPresser configuration from .env file."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    api_base: str = "https://public-api.wordpress.com/rest/v1.1"
    oauth_base: str = "https://public-api.wordpress.com/oauth2"
    token_file: Path = Path(".token")
    data_dir: Path = Path("data")

    model_config = {"env_prefix": "WORDPRESSER_", "env_file": ".env"}


def load_settings() -> Settings:
    """Load and return application settings."""
    return Settings()
