"""Core quota, history and classification logic."""
