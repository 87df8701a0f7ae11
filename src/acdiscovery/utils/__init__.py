"""Utility modules for acdiscovery."""

__all__: list[str] = []
