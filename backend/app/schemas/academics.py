from pydantic import BaseModel, EmailStr, Field, field_validator


class SubjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None


class SubjectOut(SubjectBase):
    id: str

    model_config = {"from_attributes": True}


class GradeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    level: int = Field(ge=1, le=20)


class GradeOut(GradeCreate):
    id: str

    model_config = {"from_attributes": True}


class StreamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    grade_id: str = Field(min_length=1, max_length=36)


class StreamUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    grade_id: str | None = Field(default=None, min_length=1, max_length=36)


class StreamOut(BaseModel):
    id: str
    name: str
    grade: GradeOut

    model_config = {"from_attributes": True}


class TeacherBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class TeacherCreate(TeacherBase):
    user_id: str | None = None
    subject_ids: list[str] = Field(default_factory=list, max_length=50)


class TeacherUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    user_id: str | None = None
    subject_ids: list[str] | None = Field(default=None, max_length=50)


class TeacherSummary(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str

    model_config = {"from_attributes": True}


class TeacherOut(TeacherBase):
    id: str
    full_name: str
    user_id: str | None = None
    subjects: list[SubjectOut] = Field(default_factory=list)

    model_config = {"from_attributes": True}
