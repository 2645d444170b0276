"""Assistant agent and prompt."""

from convoquota.core.agentic_system.agent.assistant_agent import AssistantAgent, InferenceFunction, PromptContext

__all__ = ["AssistantAgent", "InferenceFunction", "PromptContext"]
