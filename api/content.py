from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
from database import get_db, utcnow
from models.content import Content, CONTENT_TYPES, CONTENT_LAYOUTS
from schemas.content import ContentCreate, ContentUpdate, RejectContentRequest
from services.activity_service import log_activity
from utils.crud import get_or_404, apply_updates, commit_or_fail
from utils.errors import AuthorizationError, ValidationError
from utils.jwt_auth import require_permission, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role, parse_role

router = APIRouter()


@router.get("/content/public")
def list_public_content(
    content_type: str = Query(None, alias="type"),
    limit: int = Query(12, ge=1, le=100),
    skip: int = Query(0, ge=0),
    featured: bool = False,
    db: Session = Depends(get_db),
):
    query = db.query(Content).filter(Content.status == 'published')
    if content_type and content_type != "all":
        query = query.filter(Content.type == content_type)
    if featured:
        query = query.filter(Content.is_featured.is_(True))
    total = query.count()
    items = (
        query.order_by(Content.published_at.desc(), Content.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return {
        "content": [c.to_dict() for c in items],
        "pagination": {"total": total, "limit": limit, "skip": skip, "hasMore": skip + limit < total},
    }


# Admin ----------------------------------------------------------------------

def _is_manager(user: dict) -> bool:
    return parse_role(user["role"]) == Role.CONTENT_MANAGER


def _check_owner(content: Content, user: dict):
    if _is_manager(user) and content.created_by != user["id"]:
        raise AuthorizationError()


def _check_content_fields(data: dict):
    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Title is required")
    if "type" in data and data["type"] not in CONTENT_TYPES:
        raise ValidationError(f"Invalid content type. Must be one of: {', '.join(CONTENT_TYPES)}")
    if data.get("layout") is not None and data["layout"] not in CONTENT_LAYOUTS:
        raise ValidationError(f"Invalid layout. Must be one of: {', '.join(CONTENT_LAYOUTS)}")


@router.get("/admin/content")
def list_content(
    status: str = None,
    content_type: str = Query(None, alias="type"),
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_CONTENT)),
):
    query = db.query(Content)
    # Managers only see their own drafts alongside everything published
    if _is_manager(current_user):
        query = query.filter(or_(Content.created_by == current_user["id"], Content.status == 'published'))
    if status and status != "all":
        query = query.filter(Content.status == status)
    if content_type and content_type != "all":
        query = query.filter(Content.type == content_type)
    return [c.to_dict() for c in query.order_by(Content.created_at.desc(), Content.id.desc()).all()]


@router.post("/admin/content", status_code=201)
def create_content(
    payload: ContentCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("create_content")
    data = payload.model_dump(exclude_unset=True)
    _check_content_fields(data)
    content = Content(status='draft', created_by=current_user["id"], **data)
    db.add(content)
    commit_or_fail(db, log, "create content")
    db.refresh(content)
    log.info(f"Content {content.id} ({content.type}) created by {current_user['id']}")
    log_activity(db, current_user, "create", "content", content.id, {"title": content.title, "type": content.type})
    return {"message": "Content created successfully", "content": content.to_dict()}


@router.get("/admin/content/{content_id}")
def get_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_CONTENT)),
):
    content = get_or_404(db, Content, content_id, "Content not found")
    if content.status != 'published':
        _check_owner(content, current_user)
    return content.to_dict()


@router.put("/admin/content/{content_id}")
def update_content(
    content_id: int,
    payload: ContentUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("update_content")
    content = get_or_404(db, Content, content_id, "Content not found")
    _check_owner(content, current_user)
    data = payload.model_dump(exclude_unset=True)
    _check_content_fields(data)
    apply_updates(content, data)
    commit_or_fail(db, log, "update content")
    db.refresh(content)
    log_activity(db, current_user, "update", "content", content.id, {"fields": sorted(data)})
    return {"message": "Content updated successfully", "content": content.to_dict()}


@router.delete("/admin/content/{content_id}")
def delete_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("delete_content")
    content = get_or_404(db, Content, content_id, "Content not found")
    _check_owner(content, current_user)
    title = content.title
    db.delete(content)
    commit_or_fail(db, log, "delete content")
    log_activity(db, current_user, "delete", "content", content_id, {"title": title})
    return {"message": "Content deleted successfully"}


@router.post("/admin/content/{content_id}/submit")
def submit_content_for_review(
    content_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("submit_content_for_review")
    content = get_or_404(db, Content, content_id, "Content not found")
    _check_owner(content, current_user)
    if content.status != 'draft':
        raise ValidationError("Only draft content can be submitted for review")
    content.status = 'pending_review'
    content.rejection_reason = None
    commit_or_fail(db, log, "submit content")
    db.refresh(content)
    log.info(f"Content {content.id} submitted for review")
    log_activity(db, current_user, "submit", "content", content.id)
    return {"message": "Content submitted for review", "content": content.to_dict()}


@router.post("/admin/content/{content_id}/approve")
def approve_content(
    content_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_REVIEWER)),
):
    log = new_logger("approve_content")
    content = get_or_404(db, Content, content_id, "Content not found")
    if content.status != 'pending_review':
        raise ValidationError("Content is not pending review")
    content.status = 'published'
    content.reviewed_by = current_user["id"]
    content.published_at = utcnow()
    content.rejection_reason = None
    commit_or_fail(db, log, "approve content")
    db.refresh(content)
    log.info(f"Content {content.id} approved by {current_user['id']}")
    log_activity(db, current_user, "approve", "content", content.id)
    return {"message": "Content approved and published", "content": content.to_dict()}


@router.post("/admin/content/{content_id}/reject")
def reject_content(
    content_id: int,
    payload: RejectContentRequest,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_REVIEWER)),
):
    log = new_logger("reject_content")
    content = get_or_404(db, Content, content_id, "Content not found")
    if content.status != 'pending_review':
        raise ValidationError("Content is not pending review")
    if not (payload.reason or "").strip():
        raise ValidationError("Rejection reason is required")
    content.status = 'draft'
    content.reviewed_by = current_user["id"]
    content.rejection_reason = payload.reason.strip()
    commit_or_fail(db, log, "reject content")
    db.refresh(content)
    log.info(f"Content {content.id} rejected by {current_user['id']}")
    log_activity(db, current_user, "reject", "content", content.id, {"reason": content.rejection_reason})
    return {"message": "Content rejected", "content": content.to_dict()}
