"""Configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class TextRequestSettings(BaseSettings):
    """Charset and dispatcher configuration."""

    default_charset: str = "ISO-8859-1"
    fallback_charset: str = "utf-8"
    timeout: float = 10.0
    user_agent: str = "TextRequest/0.1"

    model_config = {"env_prefix": "TEXTREQUEST_"}


settings = TextRequestSettings()
