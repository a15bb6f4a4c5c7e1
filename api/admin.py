from fastapi import APIRouter, Depends, UploadFile, File, Form, Query
from sqlalchemy.orm import Session
from database import get_db
from models.admin_user import AdminUser
from schemas.admin import AdminUserCreate, RoleUpdate
from services import analytics_service
from services.activity_service import log_activity, recent_activity
from utils.crud import get_or_404, commit_or_fail
from utils.errors import ConflictError, ValidationError
from utils.jwt_auth import require_permission, require_role, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role, get_role_display_name, get_role_permissions, parse_role
from utils.supabase_storage import read_upload, upload_media
from utils.validation import require_email

router = APIRouter()


def _user_payload(user: AdminUser) -> dict:
    data = user.to_dict()
    data["roleDisplayName"] = get_role_display_name(user.role)
    data["permissions"] = sorted(p.value for p in get_role_permissions(user.role))
    return data


def _parse_role_or_400(role: str) -> Role:
    parsed = parse_role(role)
    if parsed is None:
        raise ValidationError(f"Invalid role. Must be one of: {', '.join(r.value for r in Role)}")
    return parsed


@router.get("/admin/users")
def list_users(
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_USERS)),
):
    return [_user_payload(u) for u in db.query(AdminUser).order_by(AdminUser.created_at.desc()).all()]


@router.post("/admin/users", status_code=201)
def create_user(
    payload: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    log = new_logger("create_admin_user")
    email = require_email(payload.email)
    role = _parse_role_or_400(payload.role)
    if not payload.name.strip():
        raise ValidationError("Name is required")
    if db.query(AdminUser).filter(AdminUser.email == email).first():
        raise ConflictError("A user with this email already exists")
    user = AdminUser(name=payload.name.strip(), email=email, role=role.value, avatar=payload.avatar)
    db.add(user)
    commit_or_fail(db, log, "create user")
    db.refresh(user)
    log.info(f"Admin user {user.id} created with role {user.role}")
    log_activity(db, current_user, "create", "user", user.id, {"email": user.email, "role": user.role})
    return {"message": "User created successfully", "user": _user_payload(user)}


@router.put("/admin/users/{user_id}/role")
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.MANAGE_SETTINGS)),
):
    log = new_logger("update_admin_user_role")
    role = _parse_role_or_400(payload.role)
    user = get_or_404(db, AdminUser, user_id, "User not found")
    if str(user.id) == current_user["id"] and role != Role.ADMIN:
        raise ValidationError("You cannot remove your own admin role")
    previous = user.role
    user.role = role.value
    commit_or_fail(db, log, "update user role")
    db.refresh(user)
    log.info(f"Admin user {user.id} role {previous} -> {user.role}")
    log_activity(db, current_user, "update_role", "user", user.id, {"from": previous, "to": user.role})
    return {"message": "Role updated successfully", "user": _user_payload(user)}


@router.get("/admin/stats")
def get_stats(
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_STATS)),
):
    return analytics_service.dashboard_counts(db)


@router.get("/admin/analytics")
def get_analytics(
    days: int = Query(30, ge=1, le=365),
    page: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_STATS)),
):
    return analytics_service.visitor_summary(db, days=days, page=page)


@router.get("/admin/activity-logs")
def get_activity_logs(
    limit: int = Query(50, ge=1, le=500),
    user_id: str = Query(None, alias="userId"),
    resource: str = None,
    db: Session = Depends(get_db),
    current_user=Depends(require_role(Role.ADMIN)),
):
    logs = recent_activity(db, limit=limit, user_id=user_id, resource=resource)
    return {"logs": [entry.to_dict() for entry in logs], "total": len(logs)}


@router.post("/admin/upload", status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    kind: str = Form("image"),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("upload_file")
    content = await read_upload(file, kind)
    log.info(f"Upload of {file.filename} ({file.content_type}, {len(content)} bytes) as {kind}")
    url = await upload_media(content, file.filename, file.content_type, kind=kind)
    return {"url": url, "filename": file.filename, "size": len(content), "type": file.content_type}
