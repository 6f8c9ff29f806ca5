"""Notification router - in-app notification inbox endpoints"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .repository import NotificationRepository
from .schemas import MarkAllReadResponse, NotificationResponse, UnreadCountResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/{user_id}", response_model=list[NotificationResponse])
async def get_notifications(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Most recent notifications for a patient, dentist or assistant"""
    return NotificationRepository.get_notifications(db, user_id, limit)


@router.get("/{user_id}/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(user_id: str, db: Session = Depends(get_db)):
    return UnreadCountResponse(unread_count=NotificationRepository.count_unread(db, user_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(notification_id: str, db: Session = Depends(get_db)):
    notification = NotificationRepository.get_notification(db, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    return NotificationRepository.mark_read(db, notification)


@router.post("/{user_id}/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(user_id: str, db: Session = Depends(get_db)):
    marked = NotificationRepository.mark_all_read(db, user_id)
    logger.info(f"✅ Marked {marked} notification(s) read for {user_id}")
    return MarkAllReadResponse(message="Notifications marked as read", markedCount=marked)
