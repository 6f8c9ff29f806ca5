"""Notification repository - Database operations for in-app notifications"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Notification


class NotificationRepository:
    """Repository for notification database operations"""

    @staticmethod
    def create_notification(db: Session, **notification_data) -> Notification:
        notification = Notification(**notification_data)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def get_notifications(db: Session, recipient_id: str, limit: int = 50) -> list[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_notification(db: Session, notification_id: str) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def count_unread(db: Session, recipient_id: str) -> int:
        return (
            db.query(func.count(Notification.id))
            .filter(Notification.recipient_id == recipient_id, Notification.read.is_(False))
            .scalar()
            or 0
        )

    @staticmethod
    def mark_read(db: Session, notification: Notification) -> Notification:
        notification.read = True
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_read(db: Session, recipient_id: str) -> int:
        """Mark every unread notification of a recipient as read; returns the count"""
        marked = (
            db.query(Notification)
            .filter(Notification.recipient_id == recipient_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        db.commit()
        return marked
