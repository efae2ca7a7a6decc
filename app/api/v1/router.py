from fastapi import APIRouter

from app.api.routers import leases, maintenance_tasks, properties, tenants, transactions

api_router = APIRouter()

api_router.include_router(properties.router)
api_router.include_router(tenants.router)
api_router.include_router(leases.router)
api_router.include_router(transactions.router)
api_router.include_router(maintenance_tasks.router)
