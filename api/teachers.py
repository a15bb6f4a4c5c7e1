from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from database import get_db, utcnow
from models.teacher import TeacherApplication, TeacherEnrollment, TEACHER_APPLICATION_STATUSES, ENROLLMENT_STATUSES
from schemas.submission import SendOtpRequest, TeacherApplicationRequest, TeacherEnrollmentRequest
from schemas.volunteer import StatusUpdateRequest
from services.activity_service import log_activity
from services.notification_service import TemplateKind, send_quietly
from services.submission_service import TeacherApplicationWorkflow, TeacherEnrollmentWorkflow
from utils.crud import get_or_404, commit_or_fail
from utils.errors import ValidationError
from utils.jwt_auth import require_permission
from utils.logger_factory import new_logger
from utils.permissions import Permission

router = APIRouter()

CODE_SENT_MESSAGE = "Verification code sent to your email address. Please check your inbox."


@router.post("/teacher-application/send-otp")
def send_teacher_application_otp(payload: SendOtpRequest, db: Session = Depends(get_db)):
    TeacherApplicationWorkflow(db).request_code(payload.email)
    return {"success": True, "message": CODE_SENT_MESSAGE}


@router.post("/teacher-application", status_code=201)
def submit_teacher_application(payload: TeacherApplicationRequest, db: Session = Depends(get_db)):
    log = new_logger("submit_teacher_application")
    result = TeacherApplicationWorkflow(db).submit(payload.model_dump(by_alias=True), payload.otp_code)
    log.info(f"Teacher application {result.record.id} created")
    return {
        "success": True,
        "message": "Application submitted successfully",
        "applicationId": result.record.id,
    }


@router.post("/teacher-enrollment/send-otp")
def send_teacher_enrollment_otp(payload: SendOtpRequest, db: Session = Depends(get_db)):
    TeacherEnrollmentWorkflow(db).request_code(payload.email)
    return {"success": True, "message": CODE_SENT_MESSAGE}


@router.post("/teacher-enrollment", status_code=201)
def submit_teacher_enrollment(payload: TeacherEnrollmentRequest, db: Session = Depends(get_db)):
    log = new_logger("submit_teacher_enrollment")
    result = TeacherEnrollmentWorkflow(db).submit(payload.model_dump(by_alias=True), payload.otp_code)
    enrollment = result.record
    if not result.created:
        log.info(f"Enrollment {enrollment.id} already {enrollment.status}; nothing created")
        return JSONResponse(status_code=200, content={
            "success": True,
            "message": "You have already been approved for the teacher training program!",
            "status": enrollment.status,
        })
    log.info(f"Teacher enrollment {enrollment.id} created with reference {enrollment.reference_number}")
    return {
        "success": True,
        "message": "Application submitted successfully",
        "applicationId": enrollment.id,
        "referenceNumber": enrollment.reference_number,
    }


# Admin ----------------------------------------------------------------------

def _notify_approved(record, name: str, program: str):
    send_quietly(record.email, TemplateKind.TEACHER_APPROVAL, {"name": name, "program": program})


@router.get("/admin/teacher-applications")
def list_teacher_applications(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_TEACHER_APPLICATIONS)),
):
    query = db.query(TeacherApplication)
    if status and status != "all":
        query = query.filter(TeacherApplication.status == status)
    applications = query.order_by(TeacherApplication.created_at.desc(), TeacherApplication.id.desc()).all()
    return {"success": True, "data": [a.to_dict() for a in applications]}


@router.put("/admin/teacher-applications/{application_id}")
def update_teacher_application(
    application_id: int,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.EDIT_TEACHER_APPLICATION)),
):
    log = new_logger("update_teacher_application")
    if payload.status not in TEACHER_APPLICATION_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(TEACHER_APPLICATION_STATUSES)}")
    application = get_or_404(db, TeacherApplication, application_id, "Application not found")
    previous = application.status
    application.status = payload.status
    commit_or_fail(db, log, "update application")
    db.refresh(application)
    log.info(f"Teacher application {application.id}: {previous} -> {application.status}")
    log_activity(db, current_user, "update_status", "teacher_application", application.id,
                 {"from": previous, "to": application.status})
    if application.status == 'approved' and previous != 'approved':
        _notify_approved(application, f"{application.first_name} {application.last_name}",
                         "the Meditation Teacher Program")
    return {"success": True, "data": application.to_dict()}


@router.delete("/admin/teacher-applications/{application_id}")
def delete_teacher_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.DELETE_TEACHER_APPLICATION)),
):
    log = new_logger("delete_teacher_application")
    application = get_or_404(db, TeacherApplication, application_id, "Application not found")
    db.delete(application)
    commit_or_fail(db, log, "delete application")
    log_activity(db, current_user, "delete", "teacher_application", application_id)
    return {"success": True, "message": "Application deleted successfully"}


@router.get("/admin/teacher-enrollments")
def list_teacher_enrollments(
    status: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_TEACHER_APPLICATIONS)),
):
    query = db.query(TeacherEnrollment)
    if status and status != "all":
        query = query.filter(TeacherEnrollment.status == status)
    enrollments = query.order_by(TeacherEnrollment.created_at.desc(), TeacherEnrollment.id.desc()).all()
    return {"success": True, "data": [e.to_dict() for e in enrollments]}


@router.put("/admin/teacher-enrollments/{enrollment_id}")
def update_teacher_enrollment(
    enrollment_id: int,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.EDIT_TEACHER_APPLICATION)),
):
    log = new_logger("update_teacher_enrollment")
    if payload.status not in ENROLLMENT_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(ENROLLMENT_STATUSES)}")
    enrollment = get_or_404(db, TeacherEnrollment, enrollment_id, "Enrollment not found")
    previous = enrollment.status
    enrollment.status = payload.status
    if payload.notes is not None:
        enrollment.reviewer_notes = payload.notes
    enrollment.reviewed_by = current_user["id"]
    enrollment.reviewed_at = utcnow()
    commit_or_fail(db, log, "update enrollment")
    db.refresh(enrollment)
    log.info(f"Teacher enrollment {enrollment.id}: {previous} -> {enrollment.status}")
    log_activity(db, current_user, "update_status", "teacher_enrollment", enrollment.id,
                 {"from": previous, "to": enrollment.status})
    if enrollment.status == 'approved' and previous != 'approved':
        _notify_approved(enrollment, enrollment.name, "the Teacher Training Program")
    return {"success": True, "data": enrollment.to_dict()}


@router.delete("/admin/teacher-enrollments/{enrollment_id}")
def delete_teacher_enrollment(
    enrollment_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.DELETE_TEACHER_APPLICATION)),
):
    log = new_logger("delete_teacher_enrollment")
    enrollment = get_or_404(db, TeacherEnrollment, enrollment_id, "Enrollment not found")
    db.delete(enrollment)
    commit_or_fail(db, log, "delete enrollment")
    log_activity(db, current_user, "delete", "teacher_enrollment", enrollment_id)
    return {"success": True, "message": "Enrollment deleted successfully"}
