from app.models.application import Application
from app.models.employer_profile import EmployerProfile
from app.models.job import Job
from app.models.message import Message
from app.models.notification import Notification
from app.models.rating import Rating
from app.models.user import User
from app.models.worker_profile import WorkerProfile

__all__ = [
    "User",
    "WorkerProfile",
    "EmployerProfile",
    "Job",
    "Application",
    "Rating",
    "Message",
    "Notification",
]
