from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from database import get_db, utcnow
from models.event import Event
from models.event_feedback import EventFeedback, FEEDBACK_TYPES, FEEDBACK_STATUSES
from models.registration import Registration
from schemas.feedback import FeedbackRequest, FeedbackModerationRequest
from services.activity_service import log_activity
from utils.crud import get_or_404, commit_or_fail
from utils.errors import AuthenticationError, AuthorizationError, ValidationError
from utils.jwt_auth import get_optional_user, require_role, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Role
from utils.validation import is_blank

router = APIRouter()

MODERATOR_ROLES = (Role.ADMIN, Role.CONTENT_MANAGER, Role.CONTENT_REVIEWER)


def _feedback_summary(feedbacks) -> dict:
    ratings = [f for f in feedbacks if f.type == 'rating']
    comments = [f for f in feedbacks if f.type == 'comment']
    photos = [f for f in feedbacks if f.type == 'photo']
    average = sum(r.rating or 0 for r in ratings) / len(ratings) if ratings else 0

    def created(f):
        return f.created_at.isoformat() if f.created_at else None

    return {
        "ratings": [
            {"id": r.id, "rating": r.rating, "userName": r.user_name, "createdAt": created(r)} for r in ratings
        ],
        "comments": [
            {"id": c.id, "comment": c.comment, "userName": c.user_name, "createdAt": created(c)} for c in comments
        ],
        "photos": [
            {"id": p.id, "photoUrl": p.photo_url, "photoCaption": p.photo_caption, "userName": p.user_name,
             "createdAt": created(p)}
            for p in photos
        ],
        "stats": {
            "totalRatings": len(ratings),
            "averageRating": round(average, 1),
            "totalComments": len(comments),
            "totalPhotos": len(photos),
        },
    }


@router.get("/events/{event_id}/feedback")
def list_event_feedback(event_id: int, db: Session = Depends(get_db)):
    feedbacks = (
        db.query(EventFeedback)
        .filter(EventFeedback.event_id == event_id, EventFeedback.status == 'approved')
        .order_by(EventFeedback.created_at.desc(), EventFeedback.id.desc())
        .all()
    )
    return {"success": True, "feedback": _feedback_summary(feedbacks)}


def _feedback_columns(payload: FeedbackRequest) -> dict:
    if payload.type not in FEEDBACK_TYPES:
        raise ValidationError("Invalid feedback type. Must be rating, comment, or photo")
    if payload.type == 'rating':
        if payload.rating is None or not 1 <= payload.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        return {"rating": payload.rating}
    if payload.type == 'comment':
        if is_blank(payload.comment):
            raise ValidationError("Comment is required")
        return {"comment": payload.comment.strip()}
    if is_blank(payload.photo_url):
        raise ValidationError("Photo URL is required")
    return {"photo_url": payload.photo_url.strip(), "photo_caption": (payload.photo_caption or "").strip() or None}


@router.post("/events/{event_id}/feedback", status_code=201)
def submit_event_feedback(
    event_id: int,
    payload: FeedbackRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    log = new_logger("submit_event_feedback")
    if current_user is None:
        raise AuthenticationError("You must be signed in to submit feedback")
    event = get_or_404(db, Event, event_id, "Event not found")

    email = (current_user.get("email") or "").strip().lower()
    registration = None
    if email:
        registration = db.query(Registration).filter(
            Registration.event_id == event.id,
            Registration.email == email,
            Registration.status != 'cancelled',
        ).first()
    if registration is None:
        log.info(f"Feedback refused for user {current_user['id']}: not registered for event {event.id}")
        raise AuthorizationError("You must be registered for this event to submit feedback")
    if utcnow() < event.end_date:
        raise ValidationError("You can only submit feedback after the event has ended")

    feedback = EventFeedback(
        event_id=event.id,
        user_id=current_user["id"],
        user_name=current_user.get("name") or registration.name,
        user_email=email,
        type=payload.type,
        status='pending',
        **_feedback_columns(payload),
    )
    db.add(feedback)
    commit_or_fail(db, log, "submit feedback")
    db.refresh(feedback)
    log.info(f"Feedback {feedback.id} ({feedback.type}) submitted for event {event.id}")
    return {
        "message": "Feedback submitted successfully. It will be visible after admin approval.",
        "feedback": {"id": feedback.id, "type": feedback.type, "status": feedback.status},
    }


# Admin ----------------------------------------------------------------------

def _event_brief(event: Event):
    if event is None:
        return None
    return {
        "id": event.id,
        "title": event.title,
        "startDate": event.start_date.isoformat() if event.start_date else None,
        "endDate": event.end_date.isoformat() if event.end_date else None,
        "imageUrl": event.image_url,
    }


@router.get("/admin/event-feedback")
def list_feedback_for_moderation(
    status: str = "pending",
    feedback_type: str = Query(None, alias="type"),
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(*MODERATOR_ROLES)),
):
    query = db.query(EventFeedback, Event).outerjoin(Event, Event.id == EventFeedback.event_id)
    if status != "all":
        query = query.filter(EventFeedback.status == status)
    if feedback_type:
        query = query.filter(EventFeedback.type == feedback_type)
    rows = query.order_by(EventFeedback.created_at.desc(), EventFeedback.id.desc()).all()
    feedbacks = [{**feedback.to_dict(), "event": _event_brief(event)} for feedback, event in rows]
    return {"success": True, "feedbacks": feedbacks, "total": len(feedbacks)}


@router.get("/admin/event-feedback/{feedback_id}")
def get_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(*MODERATOR_ROLES)),
):
    feedback = get_or_404(db, EventFeedback, feedback_id, "Feedback not found")
    return {"success": True, "feedback": feedback.to_dict()}


@router.put("/admin/event-feedback/{feedback_id}")
def moderate_feedback(
    feedback_id: int,
    payload: FeedbackModerationRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(*MODERATOR_ROLES)),
):
    log = new_logger("moderate_feedback")
    if payload.status not in FEEDBACK_STATUSES:
        raise ValidationError("Invalid status")
    feedback = get_or_404(db, EventFeedback, feedback_id, "Feedback not found")
    feedback.status = payload.status
    feedback.admin_notes = payload.admin_notes or ''
    feedback.reviewed_by = current_user.get("email") or current_user["id"]
    feedback.reviewed_at = utcnow()
    commit_or_fail(db, log, "update feedback")
    db.refresh(feedback)
    log.info(f"Feedback {feedback.id} marked {feedback.status} by {current_user['id']}")
    log_activity(db, current_user, "update", "event_feedback", feedback.id, {"status": feedback.status})
    return {"success": True, "feedback": feedback.to_dict(), "message": f"Feedback {feedback.status} successfully"}


@router.delete("/admin/event-feedback/{feedback_id}")
def delete_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_role(Role.ADMIN)),
):
    log = new_logger("delete_feedback")
    feedback = get_or_404(db, EventFeedback, feedback_id, "Feedback not found")
    db.delete(feedback)
    commit_or_fail(db, log, "delete feedback")
    log_activity(db, current_user, "delete", "event_feedback", feedback_id)
    return {"success": True, "message": "Feedback deleted successfully"}
