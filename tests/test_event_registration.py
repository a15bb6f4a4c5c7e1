import pytest

from helpers import auth_headers, latest_code, make_event, race
from models.event import Event
from models.registration import Registration
from services.submission_service import EventRegistrationWorkflow, SubmissionState
from utils.errors import AppError, ConflictError

EMAIL = "seeker@example.org"


def registration_form(email=EMAIL, **overrides):
    form = {"name": "Asha Rao", "email": email, "phone": "+91 90000 00000", "city": "Pune", "profession": "Engineer"}
    form.update(overrides)
    return form


def request_code(client, event_id, email=EMAIL):
    return client.post(f"/api/events/{event_id}/register/send-otp", json={"email": email})


def register(client, db, event_id, email=EMAIL, **overrides):
    form = registration_form(email, **overrides)
    form.setdefault("otpCode", latest_code(db, email, "event_registration"))
    return client.post(f"/api/events/{event_id}/register", json=form)


def registration_count(db, event_id):
    db.expire_all()
    return db.get(Event, event_id).current_registrations


def test_register_with_valid_code(client, db, outbox):
    event = make_event(db)

    response = request_code(client, event.id)
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert outbox[-1]["subject"].startswith("Your verification code")

    response = register(client, db, event.id)
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Registration successful"
    assert data["eventTitle"] == "Introduction to Meditation"
    assert data["timings"] == "10:00 - 12:00"

    registration = db.get(Registration, data["registrationId"])
    assert registration.email == EMAIL
    assert registration.status == "confirmed"
    assert registration_count(db, event.id) == 1
    assert outbox[-1]["subject"] == "Registration confirmed: Introduction to Meditation"


def test_code_for_another_purpose_is_rejected(client, db):
    event = make_event(db)
    client.post("/api/teacher-application/send-otp", json={"email": EMAIL})
    teacher_code = latest_code(db, EMAIL, "teacher_application")

    response = register(client, db, event.id, otpCode=teacher_code)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid or expired verification code"}
    assert db.query(Registration).count() == 0
    assert registration_count(db, event.id) == 0


def test_wrong_code_is_rejected(client, db):
    event = make_event(db)
    request_code(client, event.id)
    code = latest_code(db, EMAIL, "event_registration")

    response = register(client, db, event.id, otpCode="000000" if code != "000000" else "111111")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid or expired verification code"


def test_code_cannot_be_reused(client, db):
    event = make_event(db)
    request_code(client, event.id)
    code = latest_code(db, EMAIL, "event_registration")
    assert register(client, db, event.id, otpCode=code).status_code == 201

    response = register(client, db, event.id, otpCode=code)
    assert response.status_code == 400
    assert registration_count(db, event.id) == 1


def test_last_seat_goes_to_first_submitter(client, db):
    event = make_event(db, max_participants=1)
    request_code(client, event.id, "first@example.org")
    request_code(client, event.id, "second@example.org")

    assert register(client, db, event.id, "first@example.org").status_code == 201

    response = register(client, db, event.id, "second@example.org")
    assert response.status_code == 409
    assert response.json()["error"] == "Event is fully booked"
    assert registration_count(db, event.id) == 1


def test_full_event_refuses_new_codes(client, db, outbox):
    event = make_event(db, max_participants=2, current_registrations=2)

    response = request_code(client, event.id)
    assert response.status_code == 409
    assert response.json()["error"] == "Event is fully booked"
    assert outbox == []


def test_zero_capacity_means_unlimited(client, db):
    event = make_event(db, max_participants=0, current_registrations=40)
    request_code(client, event.id)
    assert register(client, db, event.id).status_code == 201
    assert registration_count(db, event.id) == 41


def test_duplicate_registration(client, db):
    event = make_event(db)
    request_code(client, event.id)
    assert register(client, db, event.id).status_code == 201

    response = request_code(client, event.id, EMAIL.upper())
    assert response.status_code == 409
    assert response.json()["error"] == "You have already registered for this event"


@pytest.mark.parametrize("status", ["draft", "completed", "cancelled"])
def test_closed_event(client, db, status):
    event = make_event(db, status=status)
    response = request_code(client, event.id)
    assert response.status_code == 409
    assert response.json()["error"] == "Event is not available for registration"


def test_unknown_event(client):
    response = request_code(client, 9999)
    assert response.status_code == 404
    assert response.json()["error"] == "Event not found"


def test_missing_fields(client, db):
    event = make_event(db)
    response = client.post(f"/api/events/{event.id}/register", json={"email": EMAIL, "otpCode": "123456"})
    assert response.status_code == 400
    assert response.json()["error"] == "Name, email, and phone are required"


def test_missing_code(client, db):
    event = make_event(db)
    response = client.post(f"/api/events/{event.id}/register", json=registration_form())
    assert response.status_code == 400
    assert response.json()["error"] == "Verification code is required"


def test_invalid_json(client, db):
    event = make_event(db)
    response = client.post(
        f"/api/events/{event.id}/register",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON in request body"


def test_code_delivery_failure(client, db, broken_mail):
    event = make_event(db)
    response = request_code(client, event.id)
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to send verification code. Please try again."


def test_confirmation_failure_keeps_registration(client, db, monkeypatch):
    event = make_event(db)
    request_code(client, event.id)
    code = latest_code(db, EMAIL, "event_registration")

    from services import notification_service

    def failing_deliver(to_email, subject, text, html):
        raise notification_service.NotificationError("smtp unavailable")

    monkeypatch.setattr(notification_service, "_deliver", failing_deliver)
    response = register(client, db, event.id, otpCode=code)
    assert response.status_code == 201
    assert registration_count(db, event.id) == 1


def test_concurrent_duplicate_is_rolled_back(db):
    event = make_event(db, max_participants=5)
    data = {"name": "Asha Rao", "phone": "123", "city": None, "profession": None}

    first = EventRegistrationWorkflow(db)._write(EMAIL, dict(data), event)
    with pytest.raises(ConflictError, match="already registered"):
        EventRegistrationWorkflow(db)._write(EMAIL, dict(data), event)

    remaining = db.query(Registration).all()
    assert [r.id for r in remaining] == [first.id]
    assert registration_count(db, event.id) == 1


def test_second_writer_is_refused_when_last_seat_is_taken(db):
    # Both submitters passed the pre-check; only the seat reservation decides
    event = make_event(db, max_participants=1)
    data = {"name": "Asha Rao", "phone": "123", "city": None, "profession": None}

    EventRegistrationWorkflow(db)._write("first@example.org", dict(data), event)
    with pytest.raises(ConflictError, match="Event is fully booked"):
        EventRegistrationWorkflow(db)._write("second@example.org", dict(data), event)

    assert registration_count(db, event.id) == 1
    assert db.query(Registration).count() == 1


def test_parallel_registrations_never_overbook(db):
    event_id = make_event(db, max_participants=3).id
    data = {"name": "Asha Rao", "phone": "123", "city": None, "profession": None}

    def write(session, index):
        event = session.get(Event, event_id)
        return EventRegistrationWorkflow(session)._write(f"seeker{index}@example.org", dict(data), event).id

    outcomes = race(db, 10, write)

    assert None not in outcomes
    created = [o for o in outcomes if isinstance(o, int)]
    seats = registration_count(db, event_id)
    assert seats <= 3
    assert db.query(Registration).count() == seats == len(created)
    assert len(created) + sum(isinstance(o, AppError) for o in outcomes) == 10


def test_workflow_states(db, outbox):
    event = make_event(db)
    workflow = EventRegistrationWorkflow(db)
    assert workflow.state == SubmissionState.NO_CODE_REQUESTED

    workflow.request_code(EMAIL, event.id)
    assert workflow.state == SubmissionState.CODE_REQUESTED

    workflow.submit(registration_form(), latest_code(db, EMAIL, "event_registration"), event.id)
    assert workflow.state == SubmissionState.SUBMITTED

    failed = EventRegistrationWorkflow(db)
    with pytest.raises(ConflictError):
        failed.request_code(EMAIL, event.id)
    assert failed.state == SubmissionState.FAILED


def test_public_listing_hides_drafts(client, db):
    visible = make_event(db)
    hidden = make_event(db, status="draft", title="Unannounced")

    response = client.get("/api/events/public")
    assert response.status_code == 200
    assert [e["id"] for e in response.json()] == [visible.id]

    response = client.get(f"/api/events/public/{hidden.id}")
    assert response.status_code == 404
    assert response.json()["error"] == "Event not available"


def test_admin_event_lifecycle(client, db):
    headers = auth_headers("content_manager", user_id="7")
    response = client.post("/api/admin/events", json={
        "title": "Weekend Retreat",
        "type": "beginner_physical",
        "startDate": "2026-12-05T09:00:00Z",
        "endDate": "2026-12-06T17:00:00Z",
        "maxParticipants": 20,
    }, headers=headers)
    assert response.status_code == 201
    event = response.json()["event"]
    assert event["status"] == "draft"
    assert event["createdBy"] == "7"

    response = client.put(f"/api/admin/events/{event['id']}", json={"status": "upcoming"},
                          headers=auth_headers("content_manager", user_id="8"))
    assert response.status_code == 403

    response = client.put(f"/api/admin/events/{event['id']}", json={"status": "upcoming"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["event"]["status"] == "upcoming"

    response = client.get(f"/api/admin/events/{event['id']}/registrations", headers=auth_headers("content_reviewer"))
    assert response.status_code == 200
    assert response.json()["total"] == 0

    response = client.delete(f"/api/admin/events/{event['id']}", headers=auth_headers("content_reviewer"))
    assert response.status_code == 403
    response = client.delete(f"/api/admin/events/{event['id']}", headers=auth_headers("admin"))
    assert response.status_code == 200
    assert db.query(Event).count() == 0


def test_admin_event_requires_title(client):
    response = client.post("/api/admin/events", json={
        "type": "conference", "startDate": "2026-12-05T09:00:00", "endDate": "2026-12-05T17:00:00",
    }, headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["error"] == "title is required"
