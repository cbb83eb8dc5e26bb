from collections.abc import Callable, Generator, Mapping
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.permissions import Action, Principal, has_permission
from app.core.security import decode_token
from app.db.session import SessionLocal
from app.models.academics import Teacher
from app.models.user import User, UserRole
from app.schemas.settings import MaintenanceSettings
from app.services.settings_cache import SettingsCache

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_settings_cache(request: Request) -> SettingsCache:
    return request.app.state.settings_cache


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    token = credentials.credentials
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError as exc:
        raise credentials_exception from exc

    user = db.get(User, user_id)
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    return user


def build_principal(db: Session, user: User) -> Principal:
    attributes: dict[str, Any] = {"stream_id": user.stream_id}
    if user.role == UserRole.teacher:
        attributes["teacher_id"] = db.execute(
            select(Teacher.id).where(Teacher.user_id == user.id)
        ).scalar_one_or_none()
    return Principal(user_id=user.id, role=user.role, attributes=attributes)


def authorize(
    db: Session,
    user: User,
    resource: str,
    action: Action,
    context: Mapping[str, Any] | None = None,
) -> None:
    if not has_permission(build_principal(db, user), resource, action, context):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")


def require_permission(resource: str, action: Action) -> Callable[..., User]:
    """Gate a route on an unconditional permission for the caller's role."""

    def permission_checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        authorize(db, current_user, resource, action)
        return current_user

    return permission_checker


def require_roles(*roles: UserRole) -> Callable[[User], User]:
    allowed_roles = set(roles)

    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return role_checker


def ensure_not_in_maintenance(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    cache: SettingsCache = Depends(get_settings_cache),
) -> User:
    if current_user.role == UserRole.admin:
        return current_user
    maintenance = MaintenanceSettings.model_validate(cache.get(db, "maintenance"))
    if maintenance.maintenance_mode:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=maintenance.maintenance_message)
    return current_user
