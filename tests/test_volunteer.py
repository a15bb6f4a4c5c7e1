import pytest

from helpers import auth_headers, latest_code, make_opportunity, race
from models.volunteer import VolunteerApplication, VolunteerOpportunity
from services.submission_service import VolunteerApplicationWorkflow
from utils.errors import AppError, ConflictError

EMAIL = "helper@example.org"

QUESTIONS = [
    {"id": "q1", "title": "Preferred shift", "type": "select", "options": ["Morning", "Evening"], "required": True},
    {"id": "q2", "title": "Anything else?", "type": "textarea", "required": False},
]


def application_form(email=EMAIL, **overrides):
    form = {
        "firstName": "Ravi",
        "lastName": "Kumar",
        "email": email,
        "phone": "9876543210",
        "city": "Pune",
        "state": "Maharashtra",
        "country": "India",
        "age": "29",
        "profession": "Chef",
        "experience": "Community kitchens",
        "availability": "Weekends",
        "whyVolunteer": "To serve",
        "skills": "Cooking",
    }
    form.update(overrides)
    return form


def apply(client, db, opportunity_id, email=EMAIL, headers=None, **overrides):
    client.post(f"/api/volunteer-opportunities/{opportunity_id}/apply/send-otp", json={"email": email})
    form = application_form(email, **overrides)
    form.setdefault("otpCode", latest_code(db, email, "volunteer_application"))
    return client.post(f"/api/volunteer-opportunities/{opportunity_id}/apply", json=form, headers=headers or {})


def test_apply_with_valid_code(client, db, outbox):
    opportunity = make_opportunity(db)

    response = apply(client, db, opportunity.id)
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Application submitted successfully"

    application = db.get(VolunteerApplication, data["applicationId"])
    assert application.age == 29
    assert application.interest_area == "Other"
    assert application.opportunity_title == "Retreat Kitchen Helper"
    assert application.status_history[0]["changedBy"] == "Applicant"
    db.expire_all()
    assert db.get(VolunteerOpportunity, opportunity.id).current_applications == 1
    assert outbox[-1]["subject"] == "We received your application: Retreat Kitchen Helper"


def test_signed_in_applicant_is_recorded(client, db):
    opportunity = make_opportunity(db)
    headers = auth_headers("content_reviewer", user_id="42", email="reviewer@example.org")

    response = apply(client, db, opportunity.id, headers=headers)
    assert response.status_code == 201
    application = db.get(VolunteerApplication, response.json()["applicationId"])
    assert application.user_id == "42"
    assert application.status_history[0]["changedBy"] == "reviewer@example.org"


def test_custom_questions(client, db):
    opportunity = make_opportunity(db, custom_questions=QUESTIONS)

    response = apply(client, db, opportunity.id)
    assert response.status_code == 400
    assert response.json()["error"] == 'Custom question "Preferred shift" is required'

    response = apply(client, db, opportunity.id, customAnswers={"q1": "Midnight"})
    assert response.status_code == 400
    assert response.json()["error"] == 'Invalid option selected for "Preferred shift"'

    response = apply(client, db, opportunity.id, customAnswers={"q1": "Evening", "q2": "  "})
    assert response.status_code == 201
    application = db.get(VolunteerApplication, response.json()["applicationId"])
    assert application.custom_answers == {"q1": "Evening"}


def test_invalid_age(client, db):
    opportunity = make_opportunity(db)
    response = apply(client, db, opportunity.id, age="twenty")
    assert response.status_code == 400
    assert response.json()["error"] == "Age must be a valid number"


def test_missing_field(client, db):
    opportunity = make_opportunity(db)
    response = apply(client, db, opportunity.id, skills="")
    assert response.status_code == 400
    assert response.json()["error"] == "skills is required"


def test_full_opportunity(client, db):
    opportunity = make_opportunity(db, max_volunteers=1)
    assert apply(client, db, opportunity.id, "first@example.org").status_code == 201

    response = apply(client, db, opportunity.id, "second@example.org")
    assert response.status_code == 409
    assert response.json()["error"] == "This opportunity is full"
    assert db.query(VolunteerApplication).count() == 1


def test_full_opportunity_refuses_new_codes(client, db, outbox):
    opportunity = make_opportunity(db, max_volunteers=2, current_applications=2)

    response = client.post(f"/api/volunteer-opportunities/{opportunity.id}/apply/send-otp", json={"email": EMAIL})
    assert response.status_code == 409
    assert response.json()["error"] == "This opportunity is full"
    assert outbox == []


def application_data(db, opportunity):
    data = VolunteerApplicationWorkflow(db).validate(application_form(), opportunity)
    data.pop("email")
    return data


def test_second_writer_is_refused_when_last_place_is_taken(db):
    opportunity = make_opportunity(db, max_volunteers=1)
    data = application_data(db, opportunity)

    VolunteerApplicationWorkflow(db)._write("first@example.org", dict(data), opportunity)
    with pytest.raises(ConflictError, match="This opportunity is full"):
        VolunteerApplicationWorkflow(db)._write("second@example.org", dict(data), opportunity)

    db.expire_all()
    assert db.get(VolunteerOpportunity, opportunity.id).current_applications == 1
    assert db.query(VolunteerApplication).count() == 1


def test_parallel_applications_never_exceed_places(db):
    opportunity = make_opportunity(db, max_volunteers=3)
    opportunity_id = opportunity.id
    data = application_data(db, opportunity)

    def write(session, index):
        target = session.get(VolunteerOpportunity, opportunity_id)
        return VolunteerApplicationWorkflow(session)._write(f"helper{index}@example.org", dict(data), target).id

    outcomes = race(db, 10, write)

    assert None not in outcomes
    created = [o for o in outcomes if isinstance(o, int)]
    db.expire_all()
    places = db.get(VolunteerOpportunity, opportunity_id).current_applications
    assert places <= 3
    assert db.query(VolunteerApplication).count() == places == len(created)
    assert len(created) + sum(isinstance(o, AppError) for o in outcomes) == 10


def test_duplicate_application(client, db):
    opportunity = make_opportunity(db)
    assert apply(client, db, opportunity.id).status_code == 201

    response = client.post(f"/api/volunteer-opportunities/{opportunity.id}/apply/send-otp", json={"email": EMAIL})
    assert response.status_code == 409
    assert response.json()["error"] == "You have already applied for this opportunity"


def test_closed_opportunity(client, db):
    opportunity = make_opportunity(db, status="closed")
    response = client.post(f"/api/volunteer-opportunities/{opportunity.id}/apply/send-otp", json={"email": EMAIL})
    assert response.status_code == 404
    assert response.json()["error"] == "Volunteer opportunity not found or closed"


def test_public_listing_filters(client, db):
    remote = make_opportunity(db, type="Remote", location="Online")
    make_opportunity(db, location="Mumbai")
    make_opportunity(db, status="draft")

    response = client.get("/api/volunteer-opportunities", params={"type": "Remote"})
    assert [o["id"] for o in response.json()] == [remote.id]

    response = client.get("/api/volunteer-opportunities", params={"location": "mum"})
    assert len(response.json()) == 1

    response = client.get("/api/volunteer-opportunities", params={"type": "Space"})
    assert response.status_code == 400


def test_review_application(client, db, outbox):
    opportunity = make_opportunity(db)
    application_id = apply(client, db, opportunity.id).json()["applicationId"]

    response = client.put(f"/api/admin/volunteer-applications/{application_id}",
                          json={"status": "approved"}, headers=auth_headers("content_manager"))
    assert response.status_code == 403

    response = client.put(f"/api/admin/volunteer-applications/{application_id}",
                          json={"status": "approved", "notes": "Great fit"}, headers=auth_headers())
    assert response.status_code == 200
    history = response.json()["application"]["statusHistory"]
    assert [h["status"] for h in history] == ["pending", "approved"]
    assert history[-1]["notes"] == "Great fit"
    assert outbox[-1]["subject"].startswith("Congratulations!")


def test_deleting_application_frees_a_seat(client, db):
    opportunity = make_opportunity(db, max_volunteers=1)
    application_id = apply(client, db, opportunity.id).json()["applicationId"]

    response = client.delete(f"/api/admin/volunteer-applications/{application_id}", headers=auth_headers())
    assert response.status_code == 200
    db.expire_all()
    assert db.get(VolunteerOpportunity, opportunity.id).current_applications == 0
    assert apply(client, db, opportunity.id, "next@example.org").status_code == 201


def test_admin_creates_opportunity_with_questions(client, db):
    response = client.post("/api/admin/volunteer-opportunities", json={
        "title": "Event Usher",
        "description": "Welcome guests",
        "location": "Bengaluru",
        "type": "On-site",
        "timeCommitment": "One day",
        "startDate": "2026-11-01T09:00:00",
        "endDate": "2026-11-01T18:00:00",
        "status": "open",
        "customQuestions": [{"id": "q1", "title": "T-shirt size", "type": "select"}],
    }, headers=auth_headers("content_manager"))
    assert response.status_code == 400
    assert response.json()["error"] == 'Question "T-shirt size" needs at least one option'
