from src.director.api.dependencies.services import (
    AutomationServiceDep,
    RunEngineDep,
    Store,
    get_automation_service,
    get_run_engine,
    get_store,
)

__all__ = [
    "AutomationServiceDep",
    "RunEngineDep",
    "Store",
    "get_automation_service",
    "get_run_engine",
    "get_store",
]
