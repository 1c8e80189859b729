"""Pydantic v2 schemas for notification endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationResponse(BaseModel):
    id: uuid.UUID
    event_type: str
    title: str
    message: str
    payload: dict | None = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]


class MarkReadRequest(BaseModel):
    notification_ids: list[uuid.UUID] = Field(..., min_length=1)


class MarkReadResponse(BaseModel):
    updated: int
