"""User API module - account sync endpoints."""
from prepup.app.api.v1.user.sync import router as sync_router

__all__ = ["sync_router"]
