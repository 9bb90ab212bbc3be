"""Reference discovery in prompt text."""

from .discovery import ReferenceDiscovery, discover_references

__all__ = ["ReferenceDiscovery", "discover_references"]
