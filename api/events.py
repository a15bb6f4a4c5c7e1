from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from models.event import Event, EVENT_TYPES, EVENT_STATUSES
from models.event_feedback import EventFeedback
from models.registration import Registration
from schemas.event import EventCreate, EventUpdate, event_columns
from schemas.submission import SendOtpRequest, EventRegistrationRequest
from services.activity_service import log_activity
from services.submission_service import EventRegistrationWorkflow
from utils.crud import get_or_404, apply_updates, commit_or_fail
from utils.errors import AuthorizationError, NotFoundError, ValidationError
from utils.jwt_auth import get_current_user, require_permission, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role, parse_role

router = APIRouter()

CODE_SENT_MESSAGE = "Verification code sent to your email address. Please check your inbox."
HIDDEN_STATUSES = ('draft', 'cancelled')


@router.get("/events/public")
def list_public_events(db: Session = Depends(get_db)):
    events = (
        db.query(Event)
        .filter(Event.status.notin_(HIDDEN_STATUSES))
        .order_by(Event.start_date.asc())
        .all()
    )
    return [event.to_dict() for event in events]


@router.get("/events/public/{event_id}")
def get_public_event(event_id: int, db: Session = Depends(get_db)):
    event = get_or_404(db, Event, event_id, "Event not found")
    if event.status in HIDDEN_STATUSES:
        raise NotFoundError("Event not available")
    return event.to_dict()


@router.post("/events/{event_id}/register/send-otp")
def send_event_registration_otp(event_id: int, payload: SendOtpRequest, db: Session = Depends(get_db)):
    log = new_logger("send_event_registration_otp")
    log.info(f"Registration code requested for event {event_id}")
    EventRegistrationWorkflow(db).request_code(payload.email, event_id)
    return {"success": True, "message": CODE_SENT_MESSAGE}


@router.post("/events/{event_id}/register", status_code=201)
def register_for_event(event_id: int, payload: EventRegistrationRequest, db: Session = Depends(get_db)):
    log = new_logger("register_for_event")
    result = EventRegistrationWorkflow(db).submit(payload.model_dump(by_alias=True), payload.otp_code, event_id)
    registration, event = result.record, result.target
    log.info(f"Registration {registration.id} created for event {event.id}")
    return {
        "message": "Registration successful",
        "registrationId": registration.id,
        "eventTitle": event.title,
        "startDate": event.start_date.isoformat() if event.start_date else None,
        "endDate": event.end_date.isoformat() if event.end_date else None,
        "timings": event.timings,
    }


@router.get("/user/registrations")
def list_my_registrations(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    email = (current_user.get("email") or "").strip().lower()
    rows = (
        db.query(Registration, Event)
        .outerjoin(Event, Event.id == Registration.event_id)
        .filter(Registration.email == email, Registration.status != 'cancelled')
        .order_by(Registration.created_at.desc(), Registration.id.desc())
        .all()
    )
    registrations = [
        {
            "registration": {
                "id": registration.id,
                "status": registration.status,
                "paymentStatus": registration.payment_status,
                "phone": registration.phone,
                "city": registration.city,
                "profession": registration.profession,
                "registeredAt": registration.created_at.isoformat() if registration.created_at else None,
            },
            "event": event.to_dict() if event else None,
        }
        for registration, event in rows
    ]
    return {"success": True, "registrations": registrations, "total": len(registrations)}


# Admin ----------------------------------------------------------------------

def _check_event_fields(data: dict, event: Event = None):
    if "type" in data and data["type"] not in EVENT_TYPES:
        raise ValidationError(f"Invalid event type. Must be one of: {', '.join(EVENT_TYPES)}")
    if "status" in data and data["status"] not in EVENT_STATUSES:
        raise ValidationError(f"Invalid event status. Must be one of: {', '.join(EVENT_STATUSES)}")
    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Title is required")
    start = data.get("start_date", event.start_date if event else None)
    end = data.get("end_date", event.end_date if event else None)
    if start and end and end < start:
        raise ValidationError("End date must be on or after start date")
    if data.get("max_participants") is not None and data["max_participants"] < 0:
        raise ValidationError("Maximum participants cannot be negative")


def _check_event_owner(event: Event, user: dict):
    # Managers may only change events they created
    if parse_role(user["role"]) == Role.CONTENT_MANAGER and event.created_by != user["id"]:
        raise AuthorizationError()


@router.get("/admin/events")
def list_events(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_EVENTS)),
):
    query = db.query(Event)
    if status and status != "all":
        query = query.filter(Event.status == status)
    return [event.to_dict() for event in query.order_by(Event.start_date.desc()).all()]


@router.post("/admin/events", status_code=201)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("create_event")
    data = event_columns(payload)
    _check_event_fields(data)
    data.setdefault("status", "draft")
    event = Event(created_by=current_user["id"], **data)
    db.add(event)
    commit_or_fail(db, log, "create event")
    db.refresh(event)
    log.info(f"Event {event.id} '{event.title}' created by {current_user['id']}")
    log_activity(db, current_user, "create", "event", event.id, {"title": event.title})
    return {"message": "Event created successfully", "event": event.to_dict()}


@router.put("/admin/events/{event_id}")
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("update_event")
    event = get_or_404(db, Event, event_id, "Event not found")
    _check_event_owner(event, current_user)
    data = event_columns(payload)
    _check_event_fields(data, event)
    apply_updates(event, data)
    commit_or_fail(db, log, "update event")
    db.refresh(event)
    log.info(f"Event {event.id} updated fields {sorted(data)}")
    log_activity(db, current_user, "update", "event", event.id, {"fields": sorted(data)})
    return {"message": "Event updated successfully", "event": event.to_dict()}


@router.delete("/admin/events/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("delete_event")
    event = get_or_404(db, Event, event_id, "Event not found")
    _check_event_owner(event, current_user)
    title = event.title
    removed = db.query(Registration).filter(Registration.event_id == event.id).delete(synchronize_session=False)
    db.query(EventFeedback).filter(EventFeedback.event_id == event.id).delete(synchronize_session=False)
    db.delete(event)
    commit_or_fail(db, log, "delete event")
    log.info(f"Event {event_id} deleted with {removed} registrations")
    log_activity(db, current_user, "delete", "event", event_id, {"title": title, "registrations": removed})
    return {"message": "Event deleted successfully"}


@router.get("/admin/events/{event_id}/registrations")
def list_event_registrations(
    event_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_EVENTS)),
):
    event = get_or_404(db, Event, event_id, "Event not found")
    registrations = (
        db.query(Registration)
        .filter(Registration.event_id == event.id)
        .order_by(Registration.created_at.desc(), Registration.id.desc())
        .all()
    )
    return {
        "event": event.to_dict(),
        "registrations": [r.to_dict() for r in registrations],
        "total": len(registrations),
    }
