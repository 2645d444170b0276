"""Agentic system: the assistant agent used as the inference collaborator."""
