from app.models.academics import Grade, Stream, Subject, Teacher, teacher_subjects  # noqa: F401
from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.lesson import Day, Lesson  # noqa: F401
from app.models.system_setting import SystemSetting  # noqa: F401
from app.models.time_slot import TimeSlot  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
