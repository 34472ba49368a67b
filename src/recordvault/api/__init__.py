"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Auth and health routes are open. The records router's handlers
each take Depends(get_current_user) as an argument, because the service
layer needs the identity value itself, not just a pass/fail gate.
"""

from fastapi import APIRouter

from recordvault.api.auth import router as auth_router
from recordvault.api.health import router as health_router
from recordvault.api.records import router as records_router

api_router = APIRouter(prefix="/api")

# Unauthenticated
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Bearer token required on every handler
api_router.include_router(records_router, tags=["records"])
