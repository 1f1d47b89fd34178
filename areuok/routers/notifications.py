"""
Notifications router.

GET /notifications   — recent notifications (newest first)
"""
from fastapi import APIRouter, Query
from pydantic import BaseModel

from areuok.services.notification import recent_notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationResponse(BaseModel):
    title: str
    body: str
    created_at: str


@router.get("", response_model=list[NotificationResponse], summary="Recent notifications")
def list_notifications(limit: int = Query(default=20, ge=1, le=200)):
    return [
        NotificationResponse(title=n.title, body=n.body, created_at=n.created_at)
        for n in recent_notifications()[:limit]
    ]
