"""
Inference configuration settings.

Chat model selection and call bounds for the assistant agent.

Dependencies: pydantic, pydantic_settings
System role: Model inference configuration
"""

from pydantic import Field

from convoquota.configs.base import BaseSettings, env_config


class InferenceSettings(BaseSettings):
    """Chat model configuration."""

    model_config = env_config("INFERENCE_")

    model_id: str = Field(default="gemini-2.5-flash", description="Google GenAI chat model id")
    temperature: float = Field(default=0.4, description="Sampling temperature")
    max_tokens: int = Field(default=2000, description="Maximum output tokens")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Upper bound for one inference call")
