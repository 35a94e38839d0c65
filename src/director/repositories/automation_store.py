"""In-memory entity store for automations and their run logs.

The store is the single owner of every entity. Reads hand out deep copies so
no caller can mutate stored state without going through ``put``. Operations
are synchronous; callers that need read-modify-write atomicity for one
automation hold ``lock(automation_id)`` around the sequence.
"""

import asyncio
import weakref

from src.director.core.exceptions import NotFoundError
from src.director.models import Automation, AutomationRunLog
from src.director.models.base import generate_id


class AutomationStore:
    """Automation and AutomationRunLog records keyed by id."""

    def __init__(self) -> None:
        self._automations: dict[str, Automation] = {}
        self._run_logs: list[AutomationRunLog] = []
        self._issued_ids: set[str] = set()
        # Entries vanish once no caller holds the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def new_id(self) -> str:
        """Issue an automation id that has never been issued before."""
        while True:
            candidate = generate_id()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate

    def lock(self, automation_id: str) -> asyncio.Lock:
        """Per-automation lock serialising mutations of one id.

        Raises:
            NotFoundError: If this store never issued the id.
        """
        if automation_id not in self._issued_ids:
            raise NotFoundError("Automation", automation_id)
        lock = self._locks.get(automation_id)
        if lock is None:
            lock = self._locks[automation_id] = asyncio.Lock()
        return lock

    def get(self, automation_id: str) -> Automation:
        """Get an automation by id.

        Raises:
            NotFoundError: If no automation has this id.
        """
        automation = self._automations.get(automation_id)
        if automation is None:
            raise NotFoundError("Automation", automation_id)
        return automation.model_copy(deep=True)

    def exists(self, automation_id: str) -> bool:
        return automation_id in self._automations

    def list_all(self) -> list[Automation]:
        """All automations in creation order."""
        return [automation.model_copy(deep=True) for automation in self._automations.values()]

    def count(self) -> int:
        return len(self._automations)

    def put(self, automation: Automation) -> None:
        """Insert or replace an automation.

        Existing ids keep their position in creation order. Only ids issued
        by ``new_id`` may be inserted.
        """
        if automation.id not in self._issued_ids:
            raise ValueError(f"Automation id {automation.id} was not issued by this store")
        self._automations[automation.id] = automation.model_copy(deep=True)

    def delete(self, automation_id: str) -> None:
        """Remove an automation. Its run logs are kept.

        Raises:
            NotFoundError: If no automation has this id.
        """
        if automation_id not in self._automations:
            raise NotFoundError("Automation", automation_id)
        del self._automations[automation_id]

    def add_run_log(self, log: AutomationRunLog) -> None:
        self._run_logs.append(log)

    def list_run_logs(self, automation_id: str | None = None) -> list[AutomationRunLog]:
        """Run logs, most recent first, optionally for a single automation."""
        logs = self._run_logs
        if automation_id is not None:
            logs = [log for log in logs if log.automation_id == automation_id]
        # Stable sort keeps later insertions ahead on equal start times
        return sorted(reversed(logs), key=lambda log: log.started_at, reverse=True)
