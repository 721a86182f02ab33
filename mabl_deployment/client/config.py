"""Configuration for the mabl REST API client."""

from pydantic import BaseModel, SecretStr


class MablApiConfig(BaseModel):
    """Configuration for the mabl REST API client."""

    api_key: SecretStr
    api_base_url: str = "https://api.mabl.com"
    request_timeout: float = 60.0
