"""
Notifications Domain

In-app notification inbox. Notifications are written by
app/services/notification_service.py and read/acknowledged here.
"""

from .router import router

__all__ = ["router"]
