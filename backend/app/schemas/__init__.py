from app.schemas.application import (
    ApplicationCreate,
    ApplicationPatch,
    ApplicationRecord,
    EmployerApplicationOut,
    WorkerApplicationOut,
)
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from app.schemas.job import JobCreate, JobRecord, JobUpdate, MatchedJobOut
from app.schemas.message import MessageCreate, MessageRecord, MessageSentOut, NotificationRecord
from app.schemas.rating import RatingCreate, RatingRecord
from app.schemas.user import (
    EmployerProfileIn,
    EmployerProfileRecord,
    EmployerProfileUpdate,
    EmployerWithProfileOut,
    UserOut,
    UserRecord,
    WorkerProfileIn,
    WorkerProfileRecord,
    WorkerProfileUpdate,
    WorkerSummary,
    WorkerWithProfileOut,
)

__all__ = [
    "UserRecord",
    "UserOut",
    "WorkerSummary",
    "WorkerProfileRecord",
    "WorkerProfileIn",
    "WorkerProfileUpdate",
    "WorkerWithProfileOut",
    "EmployerProfileRecord",
    "EmployerProfileIn",
    "EmployerProfileUpdate",
    "EmployerWithProfileOut",
    "JobRecord",
    "JobCreate",
    "JobUpdate",
    "MatchedJobOut",
    "ApplicationRecord",
    "ApplicationCreate",
    "ApplicationPatch",
    "WorkerApplicationOut",
    "EmployerApplicationOut",
    "RatingRecord",
    "RatingCreate",
    "MessageRecord",
    "MessageCreate",
    "MessageSentOut",
    "NotificationRecord",
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "MeResponse",
]
