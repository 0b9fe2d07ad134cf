# app/api/v1/router.py
# Master router -- registers all endpoint routers under /api/v1
# Each endpoint module registers its own router with its own prefix and tags

from fastapi import APIRouter

# Import all endpoint routers
from app.api.v1.endpoints import (
    auth,
    users,
    tutors,
    students,
    sessions,
    reviews,
    conversations,
    payment_methods,
    notifications,
)

api_router = APIRouter()

# Auth
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Directory
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(tutors.router, prefix="/tutors", tags=["Tutors"])
api_router.include_router(students.router, prefix="/students", tags=["Students"])

# Booking & Reviews
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

# Messaging
api_router.include_router(conversations.router, prefix="/conversations", tags=["Conversations"])

# Payments
api_router.include_router(payment_methods.router, prefix="/payment-methods", tags=["Payment Methods"])

# Notifications
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
