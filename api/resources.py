from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from database import get_db
from models.content import Content
from models.resource import Resource, RESOURCE_TYPES, RESOURCE_STATUSES
from schemas.content import ResourceCreate, ResourceUpdate
from services.activity_service import log_activity
from utils.crud import get_or_404, apply_updates, commit_or_fail
from utils.errors import AuthorizationError, ValidationError
from utils.jwt_auth import require_permission, require_roles
from utils.logger_factory import new_logger
from utils.permissions import Permission, Role, parse_role

router = APIRouter()

# Public listing groups: response key -> resource type
RESOURCE_GROUPS = (
    ("books", "book"),
    ("videos", "video"),
    ("magazines", "magazine"),
    ("links", "link"),
    ("blogs", "blog"),
)


@router.get("/resources/public")
def list_public_resources(
    resource_type: str = Query(None, alias="type"),
    category: str = None,
    db: Session = Depends(get_db),
):
    query = db.query(Resource).filter(Resource.status == 'published')
    if resource_type and resource_type != "all":
        query = query.filter(Resource.type == resource_type)
    if category:
        query = query.filter(Resource.category == category)
    resources = [r.to_dict() for r in query.order_by(Resource.order.asc(), Resource.created_at.desc()).all()]

    grouped = {key: [r for r in resources if r["type"] == kind] for key, kind in RESOURCE_GROUPS}
    testimonials = (
        db.query(Content)
        .filter(Content.type == 'testimonial', Content.status == 'published')
        .order_by(Content.created_at.desc())
        .all()
    )
    stats = {key: len(items) for key, items in grouped.items()}
    stats["testimonials"] = len(testimonials)
    return {
        "success": True,
        "resources": grouped,
        "testimonials": [t.to_dict() for t in testimonials],
        "stats": stats,
    }


# Admin ----------------------------------------------------------------------

def _check_resource_fields(data: dict, resource: Resource = None):
    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Title is required")
    if "type" in data and data["type"] not in RESOURCE_TYPES:
        raise ValidationError(f"Invalid resource type. Must be one of: {', '.join(RESOURCE_TYPES)}")
    if "status" in data and data["status"] not in RESOURCE_STATUSES:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(RESOURCE_STATUSES)}")
    kind = data.get("type", resource.type if resource else None)
    if kind == "video" and not data.get("video_url", resource.video_url if resource else None):
        raise ValidationError("Video URL is required for video resources")
    if kind == "link" and not data.get("link_url", resource.link_url if resource else None):
        raise ValidationError("Link URL is required for link resources")


def _check_owner(resource: Resource, user: dict):
    if parse_role(user["role"]) == Role.CONTENT_MANAGER and resource.created_by != user["id"]:
        raise AuthorizationError()


@router.get("/admin/resources")
def list_resources(
    db: Session = Depends(get_db),
    current_user=Depends(require_permission(Permission.VIEW_RESOURCES)),
):
    resources = db.query(Resource).order_by(Resource.order.asc(), Resource.created_at.desc()).all()
    return [r.to_dict() for r in resources]


@router.post("/admin/resources", status_code=201)
def create_resource(
    payload: ResourceCreate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("create_resource")
    data = payload.model_dump(exclude_unset=True)
    _check_resource_fields(data)
    resource = Resource(created_by=current_user["id"], **data)
    db.add(resource)
    commit_or_fail(db, log, "create resource")
    db.refresh(resource)
    log.info(f"Resource {resource.id} ({resource.type}) created")
    log_activity(db, current_user, "create", "resource", resource.id, {"title": resource.title})
    return {"message": "Resource created successfully", "resource": resource.to_dict()}


@router.put("/admin/resources/{resource_id}")
def update_resource(
    resource_id: int,
    payload: ResourceUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("update_resource")
    resource = get_or_404(db, Resource, resource_id, "Resource not found")
    _check_owner(resource, current_user)
    data = payload.model_dump(exclude_unset=True)
    _check_resource_fields(data, resource)
    apply_updates(resource, data)
    commit_or_fail(db, log, "update resource")
    db.refresh(resource)
    log_activity(db, current_user, "update", "resource", resource.id, {"fields": sorted(data)})
    return {"message": "Resource updated successfully", "resource": resource.to_dict()}


@router.delete("/admin/resources/{resource_id}")
def delete_resource(
    resource_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("delete_resource")
    resource = get_or_404(db, Resource, resource_id, "Resource not found")
    _check_owner(resource, current_user)
    title = resource.title
    db.delete(resource)
    commit_or_fail(db, log, "delete resource")
    log_activity(db, current_user, "delete", "resource", resource_id, {"title": title})
    return {"message": "Resource deleted successfully"}
