from fastapi import APIRouter

from nexus_leave.api.employees import employees_router
from nexus_leave.api.leaves import leaves_router
from nexus_leave.api.notifications import notifications_router
from nexus_leave.api.system import system_router

api_router = APIRouter(prefix="/api")
api_router.include_router(employees_router)
api_router.include_router(leaves_router)
api_router.include_router(notifications_router)
api_router.include_router(system_router)
