"""
Authentication configuration settings.

JWT verification parameters for linked-account bearer credentials.

Dependencies: pydantic, pydantic_settings
System role: Account lookup configuration
"""

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config


class AuthSettings(BaseSettings):
    """Bearer token verification configuration."""

    model_config = env_config("AUTH_")

    jwt_secret: str = Field(default="change-me", description="HMAC secret used to sign account tokens")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
