# app/schemas/notification.py

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    notification_type: str
    title: str
    body: Optional[str] = None
    extra_data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    total: int


class MessageResponse(BaseModel):
    message: str
