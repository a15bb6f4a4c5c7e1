from datetime import timedelta

import pytest

from database import utcnow
from helpers import auth_headers, make_event
from models.activity_log import ActivityLog
from models.event_feedback import EventFeedback
from models.registration import Registration

EMAIL = "seeker@example.org"
VISITOR = auth_headers("user", user_id="v1", email=EMAIL, name="Asha Rao")


def past_event(db, **overrides):
    start = utcnow() - timedelta(days=3)
    values = dict(start_date=start, end_date=start + timedelta(hours=2), status="completed")
    values.update(overrides)
    return make_event(db, **values)


def register_directly(db, event, email=EMAIL, status="confirmed"):
    registration = Registration(event_id=event.id, name="Asha Rao", email=email, phone="123", status=status)
    db.add(registration)
    db.commit()
    return registration


def send_feedback(client, event_id, headers=VISITOR, **body):
    body.setdefault("type", "rating")
    body.setdefault("rating", 5)
    return client.post(f"/api/events/{event_id}/feedback", json=body, headers=headers)


def test_feedback_requires_sign_in(client, db):
    event = past_event(db)
    response = send_feedback(client, event.id, headers={})
    assert response.status_code == 401
    assert response.json() == {"error": "You must be signed in to submit feedback"}


@pytest.mark.parametrize("registration_status", [None, "cancelled"])
def test_only_registered_attendees_give_feedback(client, db, registration_status):
    event = past_event(db)
    if registration_status:
        register_directly(db, event, status=registration_status)

    response = send_feedback(client, event.id)
    assert response.status_code == 403
    assert response.json()["error"] == "You must be registered for this event to submit feedback"
    assert db.query(EventFeedback).count() == 0


def test_feedback_waits_for_the_event_to_end(client, db):
    event = make_event(db)
    register_directly(db, event)

    response = send_feedback(client, event.id)
    assert response.status_code == 400
    assert response.json()["error"] == "You can only submit feedback after the event has ended"


def test_unknown_event(client):
    response = send_feedback(client, 9999)
    assert response.status_code == 404


@pytest.mark.parametrize("body, message", [
    ({"type": "hologram"}, "Invalid feedback type. Must be rating, comment, or photo"),
    ({"type": "rating", "rating": 6}, "Rating must be between 1 and 5"),
    ({"type": "comment", "comment": "   "}, "Comment is required"),
    ({"type": "photo", "photoCaption": "Sunrise"}, "Photo URL is required"),
])
def test_feedback_validation(client, db, body, message):
    event = past_event(db)
    register_directly(db, event)

    response = send_feedback(client, event.id, **body)
    assert response.status_code == 400
    assert response.json()["error"] == message


def test_feedback_is_hidden_until_approved(client, db):
    event = past_event(db)
    register_directly(db, event)

    response = send_feedback(client, event.id, rating=4)
    assert response.status_code == 201
    feedback = response.json()["feedback"]
    assert feedback["status"] == "pending"

    public = client.get(f"/api/events/{event.id}/feedback").json()["feedback"]
    assert public["ratings"] == []
    assert public["stats"]["averageRating"] == 0

    response = client.put(f"/api/admin/event-feedback/{feedback['id']}",
                          json={"status": "approved", "adminNotes": "Thanks"},
                          headers=auth_headers("content_reviewer", email="reviewer@example.org"))
    assert response.status_code == 200
    moderated = response.json()["feedback"]
    assert moderated["reviewedBy"] == "reviewer@example.org"
    assert moderated["reviewedAt"] is not None
    assert response.json()["message"] == "Feedback approved successfully"

    send_feedback(client, event.id, type="comment", comment=" Deeply calming ")
    db.query(EventFeedback).update({"status": "approved"})
    db.commit()

    public = client.get(f"/api/events/{event.id}/feedback").json()["feedback"]
    assert [r["rating"] for r in public["ratings"]] == [4]
    assert [c["comment"] for c in public["comments"]] == ["Deeply calming"]
    assert public["comments"][0]["userName"] == "Asha Rao"
    assert public["stats"] == {"totalRatings": 1, "averageRating": 4.0, "totalComments": 1, "totalPhotos": 0}


def test_average_rating_is_rounded(client, db):
    event = past_event(db)
    for rating in (5, 4, 4):
        db.add(EventFeedback(event_id=event.id, user_name="A", user_email=EMAIL, type="rating",
                             status="approved", rating=rating))
    db.commit()

    stats = client.get(f"/api/events/{event.id}/feedback").json()["feedback"]["stats"]
    assert stats["averageRating"] == 4.3


def test_moderation_queue(client, db):
    event = past_event(db, title="Silent Retreat")
    pending = EventFeedback(event_id=event.id, user_name="A", user_email=EMAIL, type="comment", comment="Lovely")
    approved = EventFeedback(event_id=event.id, user_name="B", user_email="b@example.org", type="rating",
                             rating=5, status="approved")
    db.add_all([pending, approved])
    db.commit()

    response = client.get("/api/admin/event-feedback", headers=auth_headers("content_manager"))
    assert response.status_code == 200
    data = response.json()
    assert [f["id"] for f in data["feedbacks"]] == [pending.id]
    assert data["feedbacks"][0]["event"]["title"] == "Silent Retreat"

    response = client.get("/api/admin/event-feedback", params={"status": "all", "type": "rating"},
                          headers=auth_headers())
    assert [f["id"] for f in response.json()["feedbacks"]] == [approved.id]

    response = client.get("/api/admin/event-feedback", headers=VISITOR)
    assert response.status_code == 403

    response = client.put(f"/api/admin/event-feedback/{pending.id}", json={"status": "hidden"}, headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid status"


def test_only_admins_delete_feedback(client, db):
    event = past_event(db)
    feedback = EventFeedback(event_id=event.id, user_name="A", user_email=EMAIL, type="rating", rating=3)
    db.add(feedback)
    db.commit()
    feedback_id = feedback.id

    response = client.delete(f"/api/admin/event-feedback/{feedback_id}", headers=auth_headers("content_manager"))
    assert response.status_code == 403

    response = client.delete(f"/api/admin/event-feedback/{feedback_id}", headers=auth_headers(user_id="9"))
    assert response.status_code == 200
    assert db.query(EventFeedback).count() == 0
    entry = db.query(ActivityLog).one()
    assert (entry.action, entry.resource, entry.resource_id) == ("delete", "event_feedback", str(feedback_id))

    response = client.get(f"/api/admin/event-feedback/{feedback_id}", headers=auth_headers())
    assert response.status_code == 404
    assert response.json()["error"] == "Feedback not found"


def test_deleting_an_event_removes_its_feedback(client, db):
    event = past_event(db)
    db.add(EventFeedback(event_id=event.id, user_name="A", user_email=EMAIL, type="rating", rating=5))
    db.commit()

    response = client.delete(f"/api/admin/events/{event.id}", headers=auth_headers())
    assert response.status_code == 200
    assert db.query(EventFeedback).count() == 0
