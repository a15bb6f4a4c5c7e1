"""
Visitor tracking and dashboard numbers for the admin area.
"""
import re
from datetime import timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import utcnow
from models.admin_user import AdminUser
from models.contact_message import ContactMessage
from models.content import Content
from models.event import Event
from models.registration import Registration
from models.resource import Resource
from models.subscriber import Subscriber
from models.teacher import TeacherApplication, TeacherEnrollment
from models.visitor_log import VisitorLog
from models.volunteer import VolunteerApplication
from utils.errors import DependencyFailure
from utils.logger_factory import new_logger
from utils.short_id import generate_session_id

UNTRACKED_PREFIX = "/admin"
TOP_PAGES_LIMIT = 10
RECENT_VISITS_LIMIT = 100

_MOBILE = re.compile(r"mobile|android|iphone", re.I)
_TABLET = re.compile(r"tablet|ipad", re.I)

# First match wins, so the more specific patterns come first
_OS_PATTERNS = (
    (re.compile(r"windows", re.I), "Windows"),
    (re.compile(r"android", re.I), "Android"),
    (re.compile(r"iphone|ipad", re.I), "iOS"),
    (re.compile(r"mac", re.I), "macOS"),
    (re.compile(r"linux", re.I), "Linux"),
)
_BROWSER_PATTERNS = (
    (re.compile(r"edg", re.I), "Edge"),
    (re.compile(r"chrome", re.I), "Chrome"),
    (re.compile(r"firefox", re.I), "Firefox"),
    (re.compile(r"safari", re.I), "Safari"),
)


def parse_device(user_agent: Optional[str]) -> dict:
    if not user_agent:
        return {}
    if _MOBILE.search(user_agent):
        device = {"type": "mobile"}
    elif _TABLET.search(user_agent):
        device = {"type": "tablet"}
    else:
        device = {"type": "desktop"}
    for pattern, name in _OS_PATTERNS:
        if pattern.search(user_agent):
            device["os"] = name
            break
    for pattern, name in _BROWSER_PATTERNS:
        if pattern.search(user_agent):
            device["browser"] = name
            break
    return device


def record_visit(
    db: Session,
    page: str,
    session_id: Optional[str] = None,
    page_title: Optional[str] = None,
    referrer: Optional[str] = None,
    user_agent: Optional[str] = None,
    ip_address: Optional[str] = None,
    duration: Optional[int] = None,
) -> Optional[VisitorLog]:
    """Store one page view. Returns None for pages that are never tracked.

    A report carrying ``duration`` for a session and page already on record
    updates the latest view instead of adding a new one.
    """
    log = new_logger("record_visit")
    if page.startswith(UNTRACKED_PREFIX):
        return None

    try:
        if duration is not None and session_id:
            visit = db.query(VisitorLog).filter(
                VisitorLog.session_id == session_id,
                VisitorLog.page == page,
            ).order_by(VisitorLog.created_at.desc(), VisitorLog.id.desc()).first()
            if visit is not None:
                visit.duration = duration
                db.commit()
                log.info(f"Updated duration of visit {visit.id} to {duration}s")
                return visit

        visit = VisitorLog(
            session_id=session_id or generate_session_id(),
            page=page,
            page_title=page_title,
            referrer=referrer,
            user_agent=user_agent,
            ip_address=ip_address,
            device=parse_device(user_agent),
            duration=duration,
        )
        db.add(visit)
        db.commit()
        db.refresh(visit)
    except Exception:
        db.rollback()
        log.exception(f"Failed to record visit to {page}")
        raise DependencyFailure("Failed to log visitor")
    return visit


def visitor_summary(db: Session, days: int = 30, page: Optional[str] = None) -> dict:
    since = utcnow() - timedelta(days=days)
    filters = [VisitorLog.created_at >= since]
    if page and page != "all":
        filters.append(VisitorLog.page == page)

    total_visits = db.query(func.count(VisitorLog.id)).filter(*filters).scalar()
    unique_visitors = db.query(func.count(func.distinct(VisitorLog.session_id))).filter(*filters).scalar()

    page_rows = (
        db.query(VisitorLog.page, func.count(VisitorLog.id).label("count"))
        .filter(*filters)
        .group_by(VisitorLog.page)
        .order_by(func.count(VisitorLog.id).desc())
        .limit(TOP_PAGES_LIMIT)
        .all()
    )

    day = func.date(VisitorLog.created_at)
    daily_rows = (
        db.query(day.label("day"), func.count(VisitorLog.id), func.count(func.distinct(VisitorLog.session_id)))
        .filter(*filters)
        .group_by(day)
        .order_by(day)
        .all()
    )

    recent = (
        db.query(VisitorLog)
        .filter(*filters)
        .order_by(VisitorLog.created_at.desc(), VisitorLog.id.desc())
        .limit(RECENT_VISITS_LIMIT)
        .all()
    )

    return {
        "totalVisits": total_visits or 0,
        "uniqueVisitors": unique_visitors or 0,
        "pageStats": [{"page": p, "count": count} for p, count in page_rows],
        "dailyStats": [
            {"date": str(d), "visits": visits, "uniqueVisitors": uniques}
            for d, visits, uniques in daily_rows
        ],
        "recentVisits": [v.to_dict() for v in recent],
    }


def dashboard_counts(db: Session) -> dict:
    """Headline numbers for the admin dashboard."""

    def count(model, *filters):
        return db.query(func.count(model.id)).filter(*filters).scalar() or 0

    return {
        "users": count(AdminUser),
        "content": count(Content),
        "events": count(Event),
        "resources": count(Resource),
        "messages": count(ContactMessage),
        "newMessages": count(ContactMessage, ContactMessage.status == 'new'),
        "subscribers": count(Subscriber, Subscriber.status == 'active'),
        "pendingReviews": count(Content, Content.status == 'pending_review'),
        "upcomingEvents": count(Event, Event.status == 'upcoming'),
        "registrations": count(Registration, Registration.status != 'cancelled'),
        "pendingTeacherApplications": count(TeacherApplication, TeacherApplication.status == 'pending'),
        "pendingTeacherEnrollments": count(TeacherEnrollment, TeacherEnrollment.status == 'pending'),
        "pendingVolunteerApplications": count(VolunteerApplication, VolunteerApplication.status == 'pending'),
    }
