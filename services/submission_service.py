"""
Code-gated public submissions: event registrations, teacher applications,
teacher enrollments and volunteer applications.

Every flow runs the same attempt lifecycle::

    NO_CODE_REQUESTED -> CODE_REQUESTED -> VERIFIED -> SUBMITTED
                      \\________________\\_________\\-> FAILED

``request_code`` covers the first hop (separate HTTP request), ``submit``
covers the rest. A failed attempt is terminal; the visitor starts over by
requesting a new code. Subclasses only describe their target, their form
and how a duplicate is recognised.
"""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional

from sqlalchemy.orm import Session

from database import utcnow
from models.event import Event
from models.registration import Registration
from models.teacher import TeacherApplication, TeacherEnrollment
from models.verification_code import OtpPurpose
from models.volunteer import VolunteerApplication, VolunteerOpportunity
from services import capacity, verification_service
from services.notification_service import TemplateKind, send_quietly
from utils.errors import AppError, ConflictError, DependencyFailure, NotFoundError, ValidationError
from utils.logger_factory import new_logger
from utils.short_id import generate_reference_number
from utils.validation import is_blank, parse_positive_int, require_email, require_fields, validate_custom_answers


class SubmissionState(str, Enum):
    NO_CODE_REQUESTED = "no_code_requested"
    CODE_REQUESTED = "code_requested"
    VERIFIED = "verified"
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    record: Any
    target: Any = None
    created: bool = True


def _clean(value):
    return value.strip() if isinstance(value, str) else value


class SubmissionWorkflow:
    purpose: OtpPurpose
    model = None
    confirmation_kind: TemplateKind
    seats: Optional[capacity.SeatCounter] = None
    duplicate_message = "You have already submitted this form"
    full_message = "No places are left"

    def __init__(self, db: Session, actor: Optional[dict] = None):
        self.db = db
        self.actor = actor
        self.state = SubmissionState.NO_CODE_REQUESTED
        self.log = new_logger(f"{self.purpose.value}_workflow")

    # Hooks -----------------------------------------------------------------

    def load_target(self, target_id):
        """Fetch and vet the entity being applied to. Untargeted flows return None."""
        return None

    def validate(self, form: dict, target) -> dict:
        raise NotImplementedError

    def duplicate_query(self, email: str, target):
        raise NotImplementedError

    def on_existing(self, existing):
        """Decide what an earlier submission means. Returning it ends the attempt without a new row."""
        raise ConflictError(self.duplicate_message)

    def build_record(self, email: str, data: dict, target):
        raise NotImplementedError

    def confirmation_payload(self, record, target) -> dict:
        raise NotImplementedError

    # Lifecycle -------------------------------------------------------------

    def _transition(self, state: SubmissionState):
        self.log.info(f"{self.state.value} -> {state.value}")
        self.state = state

    def _check_duplicate(self, email: str, target):
        existing = self.duplicate_query(email, target).first()
        if existing is not None:
            self.log.info(f"Existing submission {existing.id} found for {email}")
            return self.on_existing(existing)
        return None

    def request_code(self, email: Optional[str], target_id=None) -> None:
        try:
            email = require_email(email)
            target = self.load_target(target_id)
            self._check_duplicate(email, target)
            verification_service.issue_code(self.db, email, self.purpose)
        except AppError:
            self._transition(SubmissionState.FAILED)
            raise
        self._transition(SubmissionState.CODE_REQUESTED)

    def submit(self, form: dict, otp_code: Optional[str], target_id=None) -> SubmissionResult:
        try:
            target = self.load_target(target_id)
            data = self.validate(form, target)
            email = data.pop("email")
            if is_blank(otp_code):
                raise ValidationError("Verification code is required")
            verification_service.verify_code(self.db, email, self.purpose, otp_code)
            self._transition(SubmissionState.VERIFIED)
            existing = self._check_duplicate(email, target)
            if existing is not None:
                self._transition(SubmissionState.SUBMITTED)
                return SubmissionResult(existing, target, created=False)
            record = self._write(email, data, target)
        except AppError:
            self._transition(SubmissionState.FAILED)
            raise
        self._transition(SubmissionState.SUBMITTED)
        send_quietly(record.email, self.confirmation_kind, self.confirmation_payload(record, target))
        return SubmissionResult(record, target, created=True)

    def closed_error(self) -> AppError:
        return ConflictError("This is no longer accepting submissions")

    def _write(self, email: str, data: dict, target):
        reserved = False
        if self.seats is not None and target is not None:
            if not self.seats.reserve(self.db, target.id):
                self.db.refresh(target)
                if self.is_open(target):
                    self.log.warning(f"Capacity reached on {target.id}, refusing {email}")
                    raise ConflictError(self.full_message)
                raise self.closed_error()
            reserved = True

        record = self.build_record(email, data, target)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except Exception:
            self.db.rollback()
            self.log.exception(f"Failed to save submission for {email}")
            if reserved:
                self.seats.release(self.db, target.id)
            raise DependencyFailure("Failed to save your submission. Please try again.")

        # A concurrent twin may have been inserted between the duplicate check
        # and this insert; the lower id wins.
        earlier = self.duplicate_query(email, target).filter(self.model.id < record.id).first()
        if earlier is not None:
            self.log.warning(f"Duplicate submission race for {email}; keeping {earlier.id}, dropping {record.id}")
            self.db.delete(record)
            self.db.commit()
            if reserved:
                self.seats.release(self.db, target.id)
            raise ConflictError(self.duplicate_message)
        return record

    def is_open(self, target) -> bool:
        return True


class EventRegistrationWorkflow(SubmissionWorkflow):
    purpose = OtpPurpose.EVENT_REGISTRATION
    model = Registration
    confirmation_kind = TemplateKind.EVENT_REGISTRATION_CONFIRMATION
    seats = capacity.event_seats
    duplicate_message = "You have already registered for this event"
    full_message = "Event is fully booked"

    def load_target(self, target_id):
        event = self.db.query(Event).filter(Event.id == target_id).first()
        if event is None:
            raise NotFoundError("Event not found")
        if not event.is_open_for_registration():
            raise self.closed_error()
        if event.max_participants and event.current_registrations >= event.max_participants:
            raise ConflictError(self.full_message)
        return event

    def is_open(self, target) -> bool:
        return target.is_open_for_registration()

    def closed_error(self) -> AppError:
        return ConflictError("Event is not available for registration")

    def validate(self, form: dict, target) -> dict:
        require_fields(form, ("name", "email", "phone"), "Name, email, and phone are required")
        return {
            "email": require_email(form["email"]),
            "name": _clean(form["name"]),
            "phone": _clean(form["phone"]),
            "city": _clean(form.get("city")) or None,
            "profession": _clean(form.get("profession")) or None,
        }

    def duplicate_query(self, email: str, target):
        return self.db.query(Registration).filter(
            Registration.event_id == target.id,
            Registration.email == email,
            Registration.status != 'cancelled',
        )

    def build_record(self, email: str, data: dict, target):
        return Registration(event_id=target.id, email=email, status='confirmed', payment_status='free', **data)

    def confirmation_payload(self, record, target) -> dict:
        location = target.location or {}
        place = ", ".join(p for p in (location.get("venue"), location.get("city"), location.get("country")) if p)
        return {
            "name": record.name,
            "event_title": target.title,
            "event_date": target.start_date.strftime("%d %b %Y") if target.start_date else "",
            "event_time": target.timings or "",
            "event_location": place,
            "is_online": bool(location.get("online", True)),
        }


VOLUNTEER_REQUIRED_FIELDS = (
    "firstName", "lastName", "email", "phone", "city", "state", "country", "age",
    "profession", "experience", "availability", "whyVolunteer", "skills",
)


class VolunteerApplicationWorkflow(SubmissionWorkflow):
    purpose = OtpPurpose.VOLUNTEER_APPLICATION
    model = VolunteerApplication
    confirmation_kind = TemplateKind.VOLUNTEER_APPLICATION_CONFIRMATION
    seats = capacity.volunteer_seats
    duplicate_message = "You have already applied for this opportunity"
    full_message = "This opportunity is full"

    def load_target(self, target_id):
        opportunity = self.db.query(VolunteerOpportunity).filter(VolunteerOpportunity.id == target_id).first()
        if opportunity is None or opportunity.status != 'open':
            raise self.closed_error()
        if opportunity.max_volunteers and opportunity.current_applications >= opportunity.max_volunteers:
            raise ConflictError(self.full_message)
        return opportunity

    def is_open(self, target) -> bool:
        return target.status == 'open'

    def closed_error(self) -> AppError:
        return NotFoundError("Volunteer opportunity not found or closed")

    def validate(self, form: dict, target) -> dict:
        require_fields(form, VOLUNTEER_REQUIRED_FIELDS)
        email = require_email(form["email"])
        age = parse_positive_int(form["age"], "Age must be a valid number")
        answers = validate_custom_answers(target.custom_questions, form.get("customAnswers"))
        return {
            "email": email,
            "first_name": _clean(form["firstName"]),
            "last_name": _clean(form["lastName"]),
            "phone": _clean(form["phone"]),
            "city": _clean(form["city"]),
            "state": _clean(form["state"]),
            "country": _clean(form["country"]),
            "age": age,
            "profession": _clean(form["profession"]),
            "interest_area": _clean(form.get("interestArea")) or "Other",
            "experience": _clean(form["experience"]),
            "availability": _clean(form["availability"]),
            "why_volunteer": _clean(form["whyVolunteer"]),
            "skills": _clean(form["skills"]),
            "custom_answers": answers or None,
        }

    def duplicate_query(self, email: str, target):
        return self.db.query(VolunteerApplication).filter(
            VolunteerApplication.opportunity_id == target.id,
            VolunteerApplication.email == email,
        )

    def build_record(self, email: str, data: dict, target):
        changed_by = (self.actor or {}).get("email") or "Applicant"
        return VolunteerApplication(
            email=email,
            user_id=(self.actor or {}).get("id"),
            opportunity_id=target.id,
            opportunity_title=target.title,
            status='pending',
            status_history=[{"status": "pending", "changedAt": utcnow().isoformat(), "changedBy": changed_by}],
            **data,
        )

    def confirmation_payload(self, record, target) -> dict:
        return {"name": f"{record.first_name} {record.last_name}", "program": target.title}


TEACHER_REQUIRED_FIELDS = (
    "firstName", "lastName", "email", "phone", "age", "city", "state", "country",
    "profession", "education", "meditationExperience", "whyTeach", "availability",
)


def _teacher_fields(form: dict, message: Optional[str] = None) -> dict:
    require_fields(form, TEACHER_REQUIRED_FIELDS, message)
    email = require_email(form["email"])
    try:
        age = int(str(form["age"]).strip())
    except ValueError:
        raise ValidationError("Age must be a valid number")
    if age < 18 or age > 100:
        raise ValidationError("Must be between 18 and 100 years old")
    return {
        "email": email,
        "first_name": _clean(form["firstName"]),
        "last_name": _clean(form["lastName"]),
        "phone": _clean(form["phone"]),
        "age": age,
        "city": _clean(form["city"]),
        "state": _clean(form["state"]),
        "country": _clean(form["country"]),
        "profession": _clean(form["profession"]),
        "education": _clean(form["education"]),
        "meditation_experience": _clean(form["meditationExperience"]),
        "teaching_experience": _clean(form.get("teachingExperience")) or None,
        "why_teach": _clean(form["whyTeach"]),
        "availability": _clean(form["availability"]),
    }


class TeacherApplicationWorkflow(SubmissionWorkflow):
    purpose = OtpPurpose.TEACHER_APPLICATION
    model = TeacherApplication
    confirmation_kind = TemplateKind.TEACHER_APPLICATION_CONFIRMATION
    duplicate_message = "You already have a teacher application under review"

    def validate(self, form: dict, target) -> dict:
        return _teacher_fields(form)

    def duplicate_query(self, email: str, target):
        return self.db.query(TeacherApplication).filter(
            TeacherApplication.email == email,
            TeacherApplication.status.in_(('pending', 'contacted')),
        )

    def build_record(self, email: str, data: dict, target):
        return TeacherApplication(email=email, status='pending', **data)

    def confirmation_payload(self, record, target) -> dict:
        return {"name": f"{record.first_name} {record.last_name}", "program": "the Meditation Teacher Program"}


REAPPLY_WAIT_DAYS = 30


class TeacherEnrollmentWorkflow(SubmissionWorkflow):
    purpose = OtpPurpose.TEACHER_ENROLLMENT
    model = TeacherEnrollment
    confirmation_kind = TemplateKind.TEACHER_ENROLLMENT_CONFIRMATION
    duplicate_message = "You already have an application under review. Please wait for our team to respond."

    def validate(self, form: dict, target) -> dict:
        data = _teacher_fields(form, "All required fields must be filled")
        data["name"] = _clean(form.get("name")) or f"{data['first_name']} {data['last_name']}"
        return data

    def duplicate_query(self, email: str, target):
        since = utcnow() - timedelta(days=REAPPLY_WAIT_DAYS)
        return self.db.query(TeacherEnrollment).filter(
            TeacherEnrollment.email == email,
            TeacherEnrollment.created_at >= since,
        ).order_by(TeacherEnrollment.created_at.desc())

    def on_existing(self, existing):
        if existing.status in ('approved', 'enrolled'):
            return existing
        if existing.status == 'rejected':
            days_since = (utcnow() - existing.created_at).days
            days_remaining = REAPPLY_WAIT_DAYS - days_since
            raise ConflictError(
                f"Your previous application was rejected. Please wait {days_remaining} more days before re-applying."
            )
        raise ConflictError(self.duplicate_message)

    def build_record(self, email: str, data: dict, target):
        return TeacherEnrollment(email=email, status='pending', reference_number=generate_reference_number("TE"), **data)

    def confirmation_payload(self, record, target) -> dict:
        return {
            "name": record.name,
            "program": "the Teacher Training Program",
            "reference_number": record.reference_number,
        }
