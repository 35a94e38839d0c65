from fastapi import APIRouter

from src.director.api.v1 import automations, dashboard, run_logs

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(automations.router)
api_router.include_router(run_logs.router)
api_router.include_router(dashboard.router)
