from fastapi import APIRouter

from leadledger.api.routes import brokers, entries, reports

api_router = APIRouter()
api_router.include_router(brokers.router)
api_router.include_router(entries.router)
api_router.include_router(reports.router)
