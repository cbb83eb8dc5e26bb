from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

SettingsCategory = Literal["general", "academic", "maintenance"]

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "general": {
        "school_name": "ClassGrid School",
        "timezone": "UTC",
    },
    "academic": {
        "lesson_minutes": 40,
        "working_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
    },
    "maintenance": {
        "maintenance_mode": False,
        "maintenance_message": "System is under maintenance. Please try again later.",
    },
}


class MaintenanceSettings(BaseModel):
    maintenance_mode: bool = False
    maintenance_message: str = Field(
        default=DEFAULT_SETTINGS["maintenance"]["maintenance_message"], min_length=1, max_length=500
    )


class SettingsUpdate(BaseModel):
    settings: dict[str, Any] = Field(default_factory=dict)


class SettingsOut(BaseModel):
    category: SettingsCategory
    settings: dict[str, Any]
