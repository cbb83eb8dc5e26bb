from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ActivityLogOut(BaseModel):
    id: str
    actor_id: str | None = None
    actor_role: str | None = None
    action: str
    entity_type: str
    entity_id: str
    summary: str
    details: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
