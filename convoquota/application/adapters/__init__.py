"""Adapters for external collaborators."""

from convoquota.application.adapters.account_resolver import JWTAccountResolver, parse_bearer

__all__ = ["JWTAccountResolver", "parse_bearer"]
