from .verification_code import VerificationCode, OtpPurpose
from .event import Event
from .registration import Registration
from .volunteer import VolunteerOpportunity, VolunteerApplication
from .teacher import TeacherApplication, TeacherEnrollment
from .admin_user import AdminUser
from .content import Content
from .resource import Resource
from .subscriber import Subscriber
from .contact_message import ContactMessage
from .visitor_log import VisitorLog
from .activity_log import ActivityLog
from .event_feedback import EventFeedback
from .about_page import AboutPage

__all__ = [
    'VerificationCode', 'OtpPurpose', 'Event', 'Registration', 'VolunteerOpportunity',
    'VolunteerApplication', 'TeacherApplication', 'TeacherEnrollment', 'AdminUser',
    'Content', 'Resource', 'Subscriber', 'ContactMessage', 'VisitorLog', 'ActivityLog',
    'EventFeedback', 'AboutPage',
]
