from fastapi import APIRouter

from campuslease.api.routes import admin
from campuslease.api.routes import applications
from campuslease.api.routes import auth
from campuslease.api.routes import listings
from campuslease.api.routes import roommates
from campuslease.modules.messaging import routes as messaging

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router)
api_router.include_router(admin.router)
api_router.include_router(listings.router)
api_router.include_router(applications.router)
api_router.include_router(messaging.router)
api_router.include_router(roommates.router)


@api_router.get("/health", tags=["health"])
def health():
    return {"ok": True}
