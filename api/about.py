from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from models.about_page import AboutPage, ABOUT_SECTIONS, empty_about_sections
from schemas.about import AboutPageUpdate, about_columns
from services.activity_service import log_activity
from utils.crud import apply_updates, commit_or_fail
from utils.errors import ValidationError
from utils.jwt_auth import require_roles
from utils.logger_factory import new_logger
from utils.permissions import Role

router = APIRouter()


def _current_about(db: Session):
    return db.query(AboutPage).order_by(AboutPage.id.asc()).first()


@router.get("/about")
def get_about_page(section: str = None, db: Session = Depends(get_db)):
    if section and section not in ABOUT_SECTIONS:
        raise ValidationError(f"Invalid section. Must be one of: {', '.join(ABOUT_SECTIONS)}")
    about = _current_about(db)
    if about is None:
        data = empty_about_sections()
        return {"success": True, "data": data[section] if section else data}
    return {"success": True, "data": about.section(section) if section else about.to_dict()}


@router.put("/admin/about")
def update_about_page(
    payload: AboutPageUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(require_roles(Role.ADMIN, Role.CONTENT_MANAGER)),
):
    log = new_logger("update_about_page")
    data = about_columns(payload)
    about = _current_about(db)
    if about is None:
        about = AboutPage()
        db.add(about)
    apply_updates(about, data)
    commit_or_fail(db, log, "update about page")
    db.refresh(about)
    log.info(f"About page sections {sorted(data)} updated by {current_user['id']}")
    log_activity(db, current_user, "update", "about_page", about.id, {"sections": sorted(data)})
    return {"message": "About page updated successfully", "data": about.to_dict()}
