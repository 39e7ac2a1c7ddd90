from fastapi import APIRouter

from fileproxy.api.routes.files import router as files_router
from fileproxy.api.routes.system import router as system_router
from fileproxy.api.routes.webhook import router as webhook_router
from fileproxy.api.routes.webhook_admin import router as webhook_admin_router

# Registration order is match order; the system router ends with the catch-all.
api_router = APIRouter()
api_router.include_router(webhook_router)
api_router.include_router(files_router)
api_router.include_router(webhook_admin_router)
api_router.include_router(system_router)
