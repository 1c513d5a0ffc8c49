from pharminc.models.auth import Auth
from pharminc.models.specialty import Specialty
from pharminc.models.user import User
from pharminc.models.institute import Institute
from pharminc.models.job import Job, JobView
from pharminc.models.application import Application

__all__ = ["Auth", "Specialty", "User", "Institute", "Job", "JobView", "Application"]
