"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import auth, users, friends, avatars, records

api_router = APIRouter()

# Include all route modules (auth before users so /users/signup is not a user id)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(friends.router)
api_router.include_router(avatars.router)
api_router.include_router(records.router)
