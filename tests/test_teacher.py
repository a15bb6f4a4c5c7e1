from datetime import timedelta

import pytest

from database import utcnow
from helpers import auth_headers, latest_code
from models.teacher import TeacherApplication, TeacherEnrollment

EMAIL = "teacher@example.org"


def teacher_form(email=EMAIL, **overrides):
    form = {
        "firstName": "Meera",
        "lastName": "Iyer",
        "email": email,
        "phone": "9876543210",
        "age": 34,
        "city": "Chennai",
        "state": "Tamil Nadu",
        "country": "India",
        "profession": "Teacher",
        "education": "M.A.",
        "meditationExperience": "Ten years of daily practice",
        "whyTeach": "To share the practice",
        "availability": "Evenings",
    }
    form.update(overrides)
    return form


def submit(client, db, path, purpose, email=EMAIL, **overrides):
    client.post(f"/api/{path}/send-otp", json={"email": email})
    form = teacher_form(email, **overrides)
    form.setdefault("otpCode", latest_code(db, email, purpose))
    return client.post(f"/api/{path}", json=form)


def apply(client, db, **kwargs):
    return submit(client, db, "teacher-application", "teacher_application", **kwargs)


def enroll(client, db, **kwargs):
    return submit(client, db, "teacher-enrollment", "teacher_enrollment", **kwargs)


def seed_enrollment(db, status, days_ago=0):
    enrollment = TeacherEnrollment(
        name="Meera Iyer", first_name="Meera", last_name="Iyer", email=EMAIL, phone="1", age=34,
        city="Chennai", state="TN", country="India", profession="Teacher", education="M.A.",
        meditation_experience="Years", why_teach="Share", availability="Evenings", status=status,
        created_at=utcnow() - timedelta(days=days_ago),
    )
    db.add(enrollment)
    db.commit()
    return enrollment


def test_teacher_application(client, db, outbox):
    response = apply(client, db)
    assert response.status_code == 201
    application = db.get(TeacherApplication, response.json()["applicationId"])
    assert application.status == "pending"
    assert application.teaching_experience is None
    assert outbox[-1]["subject"] == "We received your application: the Meditation Teacher Program"


def test_teacher_application_under_review(client, db):
    assert apply(client, db).status_code == 201

    response = client.post("/api/teacher-application/send-otp", json={"email": EMAIL})
    assert response.status_code == 409
    assert response.json()["error"] == "You already have a teacher application under review"


def test_rejected_applicant_can_reapply(client, db):
    application_id = apply(client, db).json()["applicationId"]
    response = client.put(f"/api/admin/teacher-applications/{application_id}",
                          json={"status": "rejected"}, headers=auth_headers())
    assert response.status_code == 200

    assert apply(client, db).status_code == 201


@pytest.mark.parametrize("age", [17, 101])
def test_age_limits(client, db, age):
    response = apply(client, db, age=age)
    assert response.status_code == 400
    assert response.json()["error"] == "Must be between 18 and 100 years old"


def test_enrollment_reference_number(client, db, outbox):
    response = enroll(client, db)
    assert response.status_code == 201
    data = response.json()
    assert data["referenceNumber"].startswith("TE-")

    enrollment = db.get(TeacherEnrollment, data["applicationId"])
    assert enrollment.name == "Meera Iyer"
    assert enrollment.reference_number == data["referenceNumber"]
    assert data["referenceNumber"] in outbox[-1]["text"]


def test_enrollment_missing_fields(client, db):
    response = enroll(client, db, education="")
    assert response.status_code == 400
    assert response.json()["error"] == "All required fields must be filled"


def test_enrollment_already_approved(client, db):
    seed_enrollment(db, "approved", days_ago=3)

    response = enroll(client, db)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "You have already been approved for the teacher training program!",
        "status": "approved",
    }
    assert db.query(TeacherEnrollment).count() == 1


def test_enrollment_recently_rejected(client, db):
    seed_enrollment(db, "rejected", days_ago=10)

    response = client.post("/api/teacher-enrollment/send-otp", json={"email": EMAIL})
    assert response.status_code == 409
    assert response.json()["error"] == (
        "Your previous application was rejected. Please wait 20 more days before re-applying."
    )


def test_enrollment_pending(client, db):
    seed_enrollment(db, "under_review")
    response = client.post("/api/teacher-enrollment/send-otp", json={"email": EMAIL})
    assert response.status_code == 409
    assert response.json()["error"] == (
        "You already have an application under review. Please wait for our team to respond."
    )


def test_old_rejection_allows_new_enrollment(client, db):
    seed_enrollment(db, "rejected", days_ago=45)
    assert enroll(client, db).status_code == 201


def test_admin_reviews_enrollment(client, db, outbox):
    enrollment_id = enroll(client, db).json()["applicationId"]

    response = client.get("/api/admin/teacher-enrollments", headers=auth_headers("content_reviewer"))
    assert response.status_code == 200
    assert [e["id"] for e in response.json()["data"]] == [enrollment_id]

    response = client.put(f"/api/admin/teacher-enrollments/{enrollment_id}",
                          json={"status": "approved", "notes": "Welcome"}, headers=auth_headers(user_id="3"))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["reviewerNotes"] == "Welcome"
    assert data["reviewedBy"] == "3"
    assert outbox[-1]["subject"] == "Congratulations! Your application for the Teacher Training Program was approved"

    response = client.put(f"/api/admin/teacher-enrollments/{enrollment_id}",
                          json={"status": "graduated"}, headers=auth_headers())
    assert response.status_code == 400
