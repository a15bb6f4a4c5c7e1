from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from database import get_db
from schemas.admin import TrackingRequest
from services.analytics_service import record_visit
from utils.logger_factory import new_logger

router = APIRouter()


def get_client_ip(request: Request) -> str:
    """Extract client IP address from proxy headers, falling back to the socket peer."""
    forwarded_for = request.headers.get("x-vercel-forwarded-for") or request.headers.get("x-forwarded-for")
    if forwarded_for:
        # Take the first IP if there are multiple
        return forwarded_for.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


@router.post("/tracking")
def track_visit(payload: TrackingRequest, request: Request, db: Session = Depends(get_db)):
    log = new_logger("track_visit")
    visit = record_visit(
        db,
        page=payload.page,
        session_id=payload.session_id,
        page_title=payload.page_title,
        referrer=payload.referrer,
        user_agent=request.headers.get("user-agent"),
        ip_address=get_client_ip(request),
        duration=payload.duration,
    )
    if visit is None:
        return {"success": True, "tracked": False}
    log.info(f"Visit {visit.id} recorded for {visit.page}")
    return {"success": True, "tracked": True, "sessionId": visit.session_id}
