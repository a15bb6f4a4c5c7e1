from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from database import get_db
from models.contact_message import ContactMessage, MESSAGE_STATUSES
from models.subscriber import Subscriber
from schemas.admin import ContactRequest, SubscribeRequest, MessageStatusUpdate
from services.activity_service import log_activity
from utils.crud import get_or_404, commit_or_fail
from utils.errors import DependencyFailure, ValidationError
from utils.jwt_auth import require_permission
from utils.logger_factory import new_logger
from utils.permissions import Permission
from utils.validation import is_blank, is_valid_email, normalize_email

router = APIRouter()


@router.post("/contact", status_code=201)
def send_contact_message(payload: ContactRequest, db: Session = Depends(get_db)):
    log = new_logger("send_contact_message")
    if any(is_blank(v) for v in (payload.name, payload.email, payload.subject, payload.message)):
        raise ValidationError("All fields are required")
    email = normalize_email(payload.email)
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    message = ContactMessage(
        name=payload.name.strip(),
        email=email,
        subject=payload.subject.strip(),
        message=payload.message.strip(),
        status='new',
    )
    db.add(message)
    commit_or_fail(db, log, "send message")
    db.refresh(message)
    log.info(f"Contact message {message.id} received")
    return {"message": "Message sent successfully", "id": message.id}


@router.post("/subscribers")
def subscribe(payload: SubscribeRequest, db: Session = Depends(get_db)):
    log = new_logger("subscribe")
    email = normalize_email(payload.email)
    if not is_valid_email(email):
        raise ValidationError("Valid email is required")

    existing = db.query(Subscriber).filter(Subscriber.email == email).first()
    if existing is not None:
        if existing.status == 'unsubscribed':
            existing.status = 'active'
            commit_or_fail(db, log, "subscribe")
            log.info(f"Subscriber {existing.id} resubscribed")
            return {"message": "Successfully resubscribed!"}
        return {"message": "Already subscribed"}

    subscriber = Subscriber(email=email, status='active')
    db.add(subscriber)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with an identical signup
        db.rollback()
        log.info(f"Concurrent subscription for {email}")
        return {"message": "Already subscribed"}
    except Exception:
        db.rollback()
        log.exception(f"Failed to subscribe {email}")
        raise DependencyFailure("Failed to subscribe")
    log.info(f"New subscriber {subscriber.id}")
    return JSONResponse(status_code=201, content={"message": "Successfully subscribed!"})


# Admin ----------------------------------------------------------------------

@router.get("/admin/messages")
def list_messages(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_MESSAGES)),
):
    query = db.query(ContactMessage)
    if status and status != "all":
        query = query.filter(ContactMessage.status == status)
    return [m.to_dict() for m in query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()]


@router.put("/admin/messages/{message_id}")
def update_message_status(
    message_id: int,
    payload: MessageStatusUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_MESSAGES)),
):
    log = new_logger("update_message_status")
    if payload.status not in MESSAGE_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(MESSAGE_STATUSES)}")
    message = get_or_404(db, ContactMessage, message_id, "Message not found")
    message.status = payload.status
    commit_or_fail(db, log, "update message")
    db.refresh(message)
    log_activity(db, current_user, "update_status", "message", message.id, {"to": message.status})
    return {"message": "Message updated successfully", "data": message.to_dict()}


@router.delete("/admin/messages/{message_id}")
def delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.DELETE_MESSAGE)),
):
    log = new_logger("delete_message")
    message = get_or_404(db, ContactMessage, message_id, "Message not found")
    db.delete(message)
    commit_or_fail(db, log, "delete message")
    log_activity(db, current_user, "delete", "message", message_id)
    return {"message": "Message deleted successfully"}


@router.get("/admin/subscribers")
def list_subscribers(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_SUBSCRIBERS)),
):
    query = db.query(Subscriber)
    if status and status != "all":
        query = query.filter(Subscriber.status == status)
    return [s.to_dict() for s in query.order_by(Subscriber.subscribed_at.desc()).all()]


@router.delete("/admin/subscribers/{subscriber_id}")
def delete_subscriber(
    subscriber_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.DELETE_SUBSCRIBER)),
):
    log = new_logger("delete_subscriber")
    subscriber = get_or_404(db, Subscriber, subscriber_id, "Subscriber not found")
    db.delete(subscriber)
    commit_or_fail(db, log, "delete subscriber")
    log_activity(db, current_user, "delete", "subscriber", subscriber_id)
    return {"message": "Subscriber deleted successfully"}
