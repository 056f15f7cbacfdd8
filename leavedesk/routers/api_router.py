from fastapi import APIRouter
from leavedesk.routers import auth, leave, leave_manager

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(leave.router, tags=["Requests"])
api_router.include_router(leave_manager.router, tags=["Request Review"])
