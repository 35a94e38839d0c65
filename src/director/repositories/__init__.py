"""Repository layer - data access abstraction."""

from src.director.repositories.automation_store import AutomationStore

__all__ = ["AutomationStore"]
