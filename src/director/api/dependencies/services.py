"""Store and service factory dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from src.director.repositories import AutomationStore
from src.director.services.automation_service import AutomationService
from src.director.services.run_engine import RunEngine


def get_store(request: Request) -> AutomationStore:
    """Get the process-wide store created by the app factory."""
    return request.app.state.store


Store = Annotated[AutomationStore, Depends(get_store)]


def get_automation_service(store: Store) -> AutomationService:
    """Get automation lifecycle service."""
    return AutomationService(store)


def get_run_engine(request: Request, store: Store) -> RunEngine:
    """Get run engine, honouring a simulator installed on the app."""
    return RunEngine(store, simulator=getattr(request.app.state, "step_simulator", None))


AutomationServiceDep = Annotated[AutomationService, Depends(get_automation_service)]
RunEngineDep = Annotated[RunEngine, Depends(get_run_engine)]
