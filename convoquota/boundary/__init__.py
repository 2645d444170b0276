"""Boundary layer: persistence adapters for sessions, exchanges and conversations."""
