from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
from database import get_db, utcnow
from models.volunteer import (
    VolunteerOpportunity, VolunteerApplication, OPPORTUNITY_TYPES, OPPORTUNITY_STATUSES,
    QUESTION_TYPES, APPLICATION_STATUSES,
)
from schemas.submission import SendOtpRequest, VolunteerApplicationRequest
from schemas.volunteer import OpportunityCreate, OpportunityUpdate, StatusUpdateRequest
from services.activity_service import log_activity
from services.capacity import volunteer_seats
from services.notification_service import TemplateKind, send_quietly
from services.submission_service import VolunteerApplicationWorkflow
from utils.crud import get_or_404, apply_updates, commit_or_fail
from utils.errors import NotFoundError, ValidationError
from utils.jwt_auth import get_current_user, get_optional_user, require_permission, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role

router = APIRouter()

CODE_SENT_MESSAGE = "Verification code sent to your email address. Please check your inbox."


@router.get("/volunteer-opportunities")
def list_open_opportunities(
    opportunity_type: str = Query(None, alias="type"),
    location: str = None,
    db: Session = Depends(get_db),
):
    query = db.query(VolunteerOpportunity).filter(VolunteerOpportunity.status == 'open')
    if opportunity_type:
        if opportunity_type not in OPPORTUNITY_TYPES:
            raise ValidationError(f"Invalid type. Must be one of: {', '.join(OPPORTUNITY_TYPES)}")
        query = query.filter(VolunteerOpportunity.type == opportunity_type)
    if location:
        query = query.filter(VolunteerOpportunity.location.ilike(f"%{location.strip()}%"))
    return [o.to_dict() for o in query.order_by(VolunteerOpportunity.start_date.asc()).all()]


@router.get("/volunteer-opportunities/{opportunity_id}")
def get_opportunity(opportunity_id: int, db: Session = Depends(get_db)):
    opportunity = db.query(VolunteerOpportunity).filter(VolunteerOpportunity.id == opportunity_id).first()
    if opportunity is None or opportunity.status == 'draft':
        raise NotFoundError("Volunteer opportunity not found")
    return opportunity.to_dict()


@router.post("/volunteer-opportunities/{opportunity_id}/apply/send-otp")
def send_volunteer_application_otp(opportunity_id: int, payload: SendOtpRequest, db: Session = Depends(get_db)):
    log = new_logger("send_volunteer_application_otp")
    log.info(f"Application code requested for opportunity {opportunity_id}")
    VolunteerApplicationWorkflow(db).request_code(payload.email, opportunity_id)
    return {"success": True, "message": CODE_SENT_MESSAGE}


@router.post("/volunteer-opportunities/{opportunity_id}/apply", status_code=201)
def apply_for_opportunity(
    opportunity_id: int,
    payload: VolunteerApplicationRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    log = new_logger("apply_for_opportunity")
    workflow = VolunteerApplicationWorkflow(db, actor=current_user)
    result = workflow.submit(payload.model_dump(by_alias=True), payload.otp_code, opportunity_id)
    log.info(f"Volunteer application {result.record.id} created for opportunity {opportunity_id}")
    return {
        "success": True,
        "message": "Application submitted successfully",
        "applicationId": result.record.id,
    }


def _opportunity_brief(opportunity):
    if opportunity is None:
        return None
    return {
        "id": opportunity.id,
        "title": opportunity.title,
        "description": opportunity.description,
        "location": opportunity.location,
        "type": opportunity.type,
        "timeCommitment": opportunity.time_commitment,
        "requiredSkills": opportunity.required_skills or [],
        "startDate": opportunity.start_date.isoformat() if opportunity.start_date else None,
        "endDate": opportunity.end_date.isoformat() if opportunity.end_date else None,
    }


@router.get("/volunteer/my-applications")
def list_my_applications(db: Session = Depends(get_db), current_user=Depends(get_current_user)):
    # Applications submitted while signed out are matched by email
    email = (current_user.get("email") or "").strip().lower()
    rows = (
        db.query(VolunteerApplication, VolunteerOpportunity)
        .outerjoin(VolunteerOpportunity, VolunteerOpportunity.id == VolunteerApplication.opportunity_id)
        .filter(or_(VolunteerApplication.user_id == current_user["id"], VolunteerApplication.email == email))
        .order_by(VolunteerApplication.created_at.desc(), VolunteerApplication.id.desc())
        .all()
    )
    return {
        "applications": [
            {**application.to_dict(), "opportunity": _opportunity_brief(opportunity)}
            for application, opportunity in rows
        ]
    }


# Admin: opportunities ---------------------------------------------------------

def _opportunity_columns(payload: OpportunityUpdate) -> dict:
    data = payload.model_dump(exclude_unset=True)
    if payload.custom_questions is not None:
        data["custom_questions"] = [q.model_dump() for q in payload.custom_questions]
    return data


def _check_opportunity_fields(data: dict, opportunity: VolunteerOpportunity = None):
    for field, label in (("title", "Title"), ("description", "Description"), ("location", "Location"),
                         ("time_commitment", "Time commitment")):
        if field in data and not (data[field] or "").strip():
            raise ValidationError(f"{label} is required")
    if "type" in data and data["type"] not in OPPORTUNITY_TYPES:
        raise ValidationError(f"Invalid type. Must be one of: {', '.join(OPPORTUNITY_TYPES)}")
    if "status" in data and data["status"] not in OPPORTUNITY_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(OPPORTUNITY_STATUSES)}")
    if data.get("max_volunteers") is not None and data["max_volunteers"] < 0:
        raise ValidationError("Maximum volunteers cannot be negative")
    for question in data.get("custom_questions") or []:
        if question["type"] not in QUESTION_TYPES:
            raise ValidationError(f"Invalid question type for \"{question['title']}\"")
        if question["type"] in ("select", "checkbox") and not question.get("options"):
            raise ValidationError(f"Question \"{question['title']}\" needs at least one option")
    start = data.get("start_date", opportunity.start_date if opportunity else None)
    end = data.get("end_date", opportunity.end_date if opportunity else None)
    if start and end and end < start:
        raise ValidationError("End date must be on or after start date")


@router.get("/admin/volunteer-opportunities")
def list_opportunities(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_VOLUNTEER_APPLICATIONS)),
):
    query = db.query(VolunteerOpportunity)
    if status and status != "all":
        query = query.filter(VolunteerOpportunity.status == status)
    return [o.to_dict() for o in query.order_by(VolunteerOpportunity.created_at.desc()).all()]


@router.post("/admin/volunteer-opportunities", status_code=201)
def create_opportunity(
    payload: OpportunityCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("create_opportunity")
    data = _opportunity_columns(payload)
    _check_opportunity_fields(data)
    opportunity = VolunteerOpportunity(
        created_by={"name": current_user.get("name"), "email": current_user.get("email")},
        **data,
    )
    db.add(opportunity)
    commit_or_fail(db, log, "create volunteer opportunity")
    db.refresh(opportunity)
    log.info(f"Volunteer opportunity {opportunity.id} '{opportunity.title}' created")
    log_activity(db, current_user, "create", "volunteer_opportunity", opportunity.id, {"title": opportunity.title})
    return {"message": "Volunteer opportunity created successfully", "opportunity": opportunity.to_dict()}


@router.put("/admin/volunteer-opportunities/{opportunity_id}")
def update_opportunity(
    opportunity_id: int,
    payload: OpportunityUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("update_opportunity")
    opportunity = get_or_404(db, VolunteerOpportunity, opportunity_id, "Volunteer opportunity not found")
    data = _opportunity_columns(payload)
    _check_opportunity_fields(data, opportunity)
    apply_updates(opportunity, data)
    commit_or_fail(db, log, "update volunteer opportunity")
    db.refresh(opportunity)
    log_activity(db, current_user, "update", "volunteer_opportunity", opportunity.id, {"fields": sorted(data)})
    return {"message": "Volunteer opportunity updated successfully", "opportunity": opportunity.to_dict()}


@router.delete("/admin/volunteer-opportunities/{opportunity_id}")
def delete_opportunity(
    opportunity_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("delete_opportunity")
    opportunity = get_or_404(db, VolunteerOpportunity, opportunity_id, "Volunteer opportunity not found")
    title = opportunity.title
    # Applications keep their copy of the title and outlive the opportunity
    db.query(VolunteerApplication).filter(VolunteerApplication.opportunity_id == opportunity.id).update(
        {VolunteerApplication.opportunity_id: None}, synchronize_session=False
    )
    db.delete(opportunity)
    commit_or_fail(db, log, "delete volunteer opportunity")
    log_activity(db, current_user, "delete", "volunteer_opportunity", opportunity_id, {"title": title})
    return {"message": "Volunteer opportunity deleted successfully"}


# Admin: applications ----------------------------------------------------------

@router.get("/admin/volunteer-applications")
def list_applications(
    status: str = None,
    opportunity_id: int = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_VOLUNTEER_APPLICATIONS)),
):
    query = db.query(VolunteerApplication)
    if status and status != "all":
        query = query.filter(VolunteerApplication.status == status)
    if opportunity_id:
        query = query.filter(VolunteerApplication.opportunity_id == opportunity_id)
    applications = query.order_by(VolunteerApplication.created_at.desc(), VolunteerApplication.id.desc()).all()
    return [a.to_dict() for a in applications]


@router.get("/admin/volunteer-applications/{application_id}")
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_VOLUNTEER_APPLICATIONS)),
):
    return get_or_404(db, VolunteerApplication, application_id, "Application not found").to_dict()


@router.put("/admin/volunteer-applications/{application_id}")
def update_application_status(
    application_id: int,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.EDIT_VOLUNTEER_APPLICATION)),
):
    log = new_logger("update_volunteer_application_status")
    if payload.status not in APPLICATION_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(APPLICATION_STATUSES)}")
    application = get_or_404(db, VolunteerApplication, application_id, "Application not found")
    previous = application.status
    entry = {"status": payload.status, "changedAt": utcnow().isoformat(), "changedBy": current_user.get("email")}
    if payload.notes:
        entry["notes"] = payload.notes
    application.status = payload.status
    # Reassign so the JSON column registers the change
    application.status_history = list(application.status_history or []) + [entry]
    commit_or_fail(db, log, "update application")
    db.refresh(application)
    log.info(f"Volunteer application {application.id}: {previous} -> {application.status}")
    log_activity(db, current_user, "update_status", "volunteer_application", application.id,
                 {"from": previous, "to": application.status})

    if application.status == 'approved' and previous != 'approved':
        send_quietly(application.email, TemplateKind.VOLUNTEER_APPROVAL, {
            "name": f"{application.first_name} {application.last_name}",
            "program": application.opportunity_title or "our volunteer program",
        })
    return {"message": "Application updated successfully", "application": application.to_dict()}


@router.delete("/admin/volunteer-applications/{application_id}")
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.DELETE_VOLUNTEER_APPLICATION)),
):
    log = new_logger("delete_volunteer_application")
    application = get_or_404(db, VolunteerApplication, application_id, "Application not found")
    opportunity_id = application.opportunity_id
    db.delete(application)
    commit_or_fail(db, log, "delete application")
    if opportunity_id is not None:
        volunteer_seats.release(db, opportunity_id)
    log_activity(db, current_user, "delete", "volunteer_application", application_id)
    return {"message": "Application deleted successfully"}
