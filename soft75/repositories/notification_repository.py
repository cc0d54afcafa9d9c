"""
Notification repository - Data access layer for delivered notifications.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from soft75.models import Notification


class NotificationRepository:
    """Repository for Notification data access"""

    @staticmethod
    def get_by_id(db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    @staticmethod
    def get_all(db: Session, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        """Get notifications, newest first"""
        query = db.query(Notification)
        if unread_only:
            query = query.filter(Notification.read == False)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()

    @staticmethod
    def create(db: Session, notification: Notification) -> Notification:
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def update(db: Session, notification: Notification) -> Notification:
        db.commit()
        db.refresh(notification)
        return notification

    @staticmethod
    def delete_all(db: Session) -> int:
        return db.query(Notification).delete()
