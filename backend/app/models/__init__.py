from app.models.user import User
from app.models.job import Job, Application

__all__ = ["User", "Job", "Application"]
