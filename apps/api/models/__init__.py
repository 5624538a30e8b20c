"""Models package."""

from .instructor import Instructor
from .auth_user import AuthUser
from .client import Client
from .lesson_session import LessonSession
from .report import Report
from .report_photo import ReportPhoto
from .report_share import ReportShare
from .homework_assignment import HomeworkAssignment
from .client_profile import ClientProfile
from .client_tracking_log import ClientTrackingLog
from .client_progress_photo import ClientProgressPhoto
