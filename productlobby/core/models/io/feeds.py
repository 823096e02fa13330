"""
Activity feed I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """One entry in an activity timeline."""

    type: str = Field(description="lobby, pledge, comment, poll or survey")
    id: str
    campaign_id: str
    user_id: Optional[str] = None
    summary: str
    created_at: datetime
    data: Dict[str, Any] = Field(default_factory=dict)


class Feed(BaseModel):
    items: List[FeedItem]
    total: int
