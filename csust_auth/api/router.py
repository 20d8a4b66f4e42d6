from fastapi import APIRouter
from .routes_auth import router as auth_router
from .routes_services import router as services_router

api_router = APIRouter()
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(services_router, prefix="/services", tags=["services"])
