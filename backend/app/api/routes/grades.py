from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_permission
from app.core.exceptions import HasDependentsError, ResourceNotFoundError
from app.core.permissions import Action, Resource
from app.models.academics import Grade, Stream
from app.models.user import User
from app.schemas.academics import GradeCreate, GradeOut

router = APIRouter()


@router.get("/", response_model=list[GradeOut])
def list_grades(
    current_user: User = Depends(require_permission(Resource.GRADES, Action.read)),
    db: Session = Depends(get_db),
) -> list[GradeOut]:
    return list(db.execute(select(Grade).order_by(Grade.level, Grade.name)).scalars())


@router.post("/", response_model=GradeOut, status_code=status.HTTP_201_CREATED)
def create_grade(
    payload: GradeCreate,
    current_user: User = Depends(require_permission(Resource.GRADES, Action.create)),
    db: Session = Depends(get_db),
) -> GradeOut:
    existing = db.execute(select(Grade).where(Grade.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Grade name already exists")
    grade = Grade(**payload.model_dump())
    db.add(grade)
    db.commit()
    db.refresh(grade)
    return grade


@router.delete("/{grade_id}")
def delete_grade(
    grade_id: str,
    current_user: User = Depends(require_permission(Resource.GRADES, Action.delete)),
    db: Session = Depends(get_db),
) -> dict:
    grade = db.get(Grade, grade_id)
    if grade is None:
        raise ResourceNotFoundError("Grade", grade_id)
    streams = db.execute(select(func.count()).select_from(Stream).where(Stream.grade_id == grade_id)).scalar_one()
    if streams:
        raise HasDependentsError("Grade", grade_id, streams)
    db.delete(grade)
    db.commit()
    return {"success": True}
