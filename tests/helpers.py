"""Builders and token helpers shared by the test modules."""
import threading
from datetime import timedelta

from jose import jwt
from sqlalchemy.orm import sessionmaker

from database import utcnow
from models.event import Event
from models.volunteer import VolunteerOpportunity
from services import verification_code_store
from utils import jwt_auth
from utils.errors import AppError


def create_jwt(role="admin", user_id="1", email="admin@example.org", name="Test Admin"):
    payload = {"sub": user_id, "role": role, "email": email, "name": name}
    return jwt.encode(payload, jwt_auth.SECRET_KEY, algorithm=jwt_auth.ALGORITHM)


def auth_headers(role="admin", user_id="1", **claims):
    return {"Authorization": f"Bearer {create_jwt(role=role, user_id=user_id, **claims)}"}


def latest_code(db, email, purpose):
    db.expire_all()
    record = verification_code_store.get(db, email, purpose)
    return record.code if record else None


def make_event(db, **overrides):
    start = utcnow() + timedelta(days=7)
    values = dict(
        title="Introduction to Meditation",
        description="A gentle start",
        type="beginner_online",
        start_date=start,
        end_date=start + timedelta(hours=2),
        timings="10:00 - 12:00",
        status="upcoming",
        location={"online": True},
    )
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def make_opportunity(db, **overrides):
    start = utcnow() + timedelta(days=3)
    values = dict(
        title="Retreat Kitchen Helper",
        description="Help prepare meals",
        location="Pune",
        type="On-site",
        time_commitment="4 hours a week",
        start_date=start,
        end_date=start + timedelta(days=30),
        max_volunteers=0,
        status="open",
    )
    values.update(overrides)
    opportunity = VolunteerOpportunity(**values)
    db.add(opportunity)
    db.commit()
    db.refresh(opportunity)
    return opportunity


def race(db, attempts, work):
    """Run ``work(session, index)`` from ``attempts`` threads released together.

    Each thread gets its own session on the test engine. Returns one outcome
    per thread: whatever ``work`` returned, or the AppError it raised.
    """
    factory = sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())
    barrier = threading.Barrier(attempts)
    outcomes = [None] * attempts

    def run(index):
        session = factory()
        try:
            barrier.wait()
            outcomes[index] = work(session, index)
        except AppError as e:
            outcomes[index] = e
        finally:
            session.close()

    threads = [threading.Thread(target=run, args=(i,)) for i in range(attempts)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes
