from typing import get_args

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_settings_cache, require_permission
from app.core.permissions import Action, Resource
from app.models.system_setting import SystemSetting
from app.models.user import User
from app.schemas.settings import MaintenanceSettings, SettingsCategory, SettingsOut, SettingsUpdate
from app.services.audit import log_activity
from app.services.settings_cache import SettingsCache, load_settings_category

router = APIRouter()
CATEGORIES = set(get_args(SettingsCategory))


def _ensure_category(category: str) -> None:
    if category not in CATEGORIES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings category not found")


@router.get("/settings/{category}", response_model=SettingsOut)
def get_settings_category(
    category: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
) -> SettingsOut:
    _ensure_category(category)
    return SettingsOut(category=category, settings=cache.get(db, category))


@router.put("/settings/{category}", response_model=SettingsOut)
def update_settings_category(
    category: str,
    payload: SettingsUpdate,
    current_user: User = Depends(require_permission(Resource.SETTINGS, Action.update)),
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
) -> SettingsOut:
    _ensure_category(category)
    merged = {**load_settings_category(db, category), **payload.settings}
    if category == "maintenance":
        merged = MaintenanceSettings.model_validate(merged).model_dump()

    record = db.get(SystemSetting, category)
    if record is None:
        record = SystemSetting(category=category, settings=merged)
        db.add(record)
    else:
        record.settings = merged
    record.updated_by_id = current_user.id
    log_activity(
        db,
        user=current_user,
        action="settings.update",
        entity_type="system_settings",
        entity_id=category,
        summary=f"Updated {category} settings",
        details={"keys": sorted(payload.settings)},
    )
    db.commit()
    cache.invalidate(category)
    return SettingsOut(category=category, settings=cache.get(db, category))
