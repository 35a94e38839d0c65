"""Tests for the in-memory entity store."""

import gc
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from src.director.core.exceptions import NotFoundError
from src.director.models import (
    Automation,
    AutomationRunLog,
    Frequency,
    Platform,
    RunStatus,
)
from src.director.repositories import AutomationStore

pytestmark = pytest.mark.unit

CREATED = datetime(2025, 1, 1, tzinfo=UTC)


def make_automation(store: AutomationStore, name: str = "Store Test") -> Automation:
    return Automation(
        id=store.new_id(),
        name=name,
        persona="Persona for store tests",
        target_audience="Testers",
        primary_platform=Platform.YOUTUBE,
        schedule={"frequency": Frequency.DAILY, "next_run": CREATED + timedelta(days=1)},
        created_at=CREATED,
    )


def make_log(automation_id: str, started_at: datetime) -> AutomationRunLog:
    return AutomationRunLog(
        automation_id=automation_id, status=RunStatus.COMPLETED, started_at=started_at
    )


class TestAutomations:
    """Tests for automation records."""

    def test_get_missing_raises_not_found(self, store):
        """Unknown ids raise NotFoundError carrying the id."""
        with pytest.raises(NotFoundError) as exc_info:
            store.get("missing")
        assert exc_info.value.entity_id == "missing"

    def test_put_then_get(self, store):
        """A stored automation reads back equal."""
        automation = make_automation(store)
        store.put(automation)
        assert store.get(automation.id) == automation

    def test_get_returns_copies(self, store):
        """Mutating a fetched automation leaves the stored one alone."""
        automation = make_automation(store)
        store.put(automation)

        fetched = store.get(automation.id)
        fetched.name = "Mutated outside the store"
        fetched.schedule.cadence_description = "changed"

        again = store.get(automation.id)
        assert again.name == "Store Test"
        assert again.schedule.cadence_description is None

    def test_put_copies_input(self, store):
        """Mutating the object after put does not leak into the store."""
        automation = make_automation(store)
        store.put(automation)
        automation.name = "Changed after put"
        assert store.get(automation.id).name == "Store Test"

    def test_get_twice_returns_identical_values(self, store):
        """Two reads with no write in between are equal."""
        automation = make_automation(store)
        store.put(automation)
        assert store.get(automation.id) == store.get(automation.id)

    def test_list_keeps_creation_order(self, store):
        """Listing follows insertion order, even after replacement."""
        first, second, third = (make_automation(store, name) for name in ("A1", "B2", "C3"))
        for automation in (first, second, third):
            store.put(automation)
        # Replacing an existing record keeps its position
        second.name = "B2 renamed"
        store.put(second)

        assert [a.name for a in store.list_all()] == ["A1", "B2 renamed", "C3"]

    def test_put_rejects_ids_not_issued_by_store(self, store):
        """Only ids from new_id may be inserted."""
        automation = make_automation(store)
        foreign = automation.model_copy(update={"id": "not-issued"})
        with pytest.raises(ValueError):
            store.put(foreign)

    def test_delete(self, store):
        """Deleted automations are gone."""
        automation = make_automation(store)
        store.put(automation)
        store.delete(automation.id)
        assert not store.exists(automation.id)
        with pytest.raises(NotFoundError):
            store.get(automation.id)

    def test_delete_missing_raises_not_found(self, store):
        """Deleting an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            store.delete("missing")

    def test_ids_never_reissued(self, store):
        """A deleted id is never handed out again."""
        automation = make_automation(store)
        store.put(automation)
        store.delete(automation.id)
        issued = {store.new_id() for _ in range(200)}
        assert automation.id not in issued


class TestLocks:
    """Tests for per-automation locks."""

    def test_lock_is_per_automation(self, store):
        """Holders of one id share a lock; other ids get their own."""
        first, second = store.new_id(), store.new_id()
        held = store.lock(first)
        assert store.lock(first) is held
        assert store.lock(second) is not held

    def test_unknown_id_has_no_lock(self, store):
        """Ids never issued by the store are rejected."""
        with pytest.raises(NotFoundError):
            store.lock("missing")
        assert len(store._locks) == 0

    def test_unused_locks_are_released(self, store):
        """Locks nobody holds are dropped, including those of deleted ids."""
        automation = make_automation(store)
        store.put(automation)
        store.lock(automation.id)
        store.delete(automation.id)

        gc.collect()

        assert len(store._locks) == 0

    async def test_held_lock_survives_lookup(self, store):
        """A lock held across an await is the one later callers receive."""
        automation_id = store.new_id()
        async with store.lock(automation_id):
            assert store.lock(automation_id).locked()


class TestRunLogs:
    """Tests for run log storage."""

    def test_most_recent_first(self, store):
        """Logs are listed newest start time first."""
        store.add_run_log(make_log("a", CREATED))
        store.add_run_log(make_log("a", CREATED + timedelta(hours=2)))
        store.add_run_log(make_log("a", CREATED + timedelta(hours=1)))

        started = [log.started_at for log in store.list_run_logs()]
        assert started == sorted(started, reverse=True)

    def test_ties_keep_latest_insert_first(self, store):
        """Equal start times list the later insert first."""
        older = make_log("a", CREATED)
        newer = make_log("a", CREATED)
        store.add_run_log(older)
        store.add_run_log(newer)
        assert [log.id for log in store.list_run_logs()] == [newer.id, older.id]

    def test_filter_by_automation(self, store):
        """Filtering returns only the requested automation's logs."""
        store.add_run_log(make_log("a", CREATED))
        store.add_run_log(make_log("b", CREATED))
        logs = store.list_run_logs("a")
        assert len(logs) == 1
        assert logs[0].automation_id == "a"

    def test_logs_survive_automation_delete(self, store):
        """Run logs outlive their automation."""
        automation = make_automation(store)
        store.put(automation)
        store.add_run_log(make_log(automation.id, CREATED))
        store.delete(automation.id)
        assert len(store.list_run_logs(automation.id)) == 1

    def test_logs_are_immutable(self, store):
        """Stored logs are frozen."""
        log = make_log("a", CREATED)
        store.add_run_log(log)
        with pytest.raises(ValidationError):
            store.list_run_logs()[0].status = RunStatus.FAILED
