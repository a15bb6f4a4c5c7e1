from helpers import auth_headers
from models.content import Content
from models.resource import Resource

MANAGER = auth_headers("content_manager", user_id="11")
OTHER_MANAGER = auth_headers("content_manager", user_id="12")
REVIEWER = auth_headers("content_reviewer", user_id="21")


def create_content(client, headers=MANAGER, **overrides):
    body = {"title": "Morning Sit", "type": "poster", "content": {"imageUrl": "https://cdn.example.org/p.png"}}
    body.update(overrides)
    return client.post("/api/admin/content", json=body, headers=headers)


def test_review_flow_publishes_content(client, db):
    response = create_content(client)
    assert response.status_code == 201
    content = response.json()["content"]
    assert content["status"] == "draft"
    assert content["createdBy"] == "11"

    # Reviewers cannot approve drafts
    response = client.post(f"/api/admin/content/{content['id']}/approve", headers=REVIEWER)
    assert response.status_code == 400
    assert response.json()["error"] == "Content is not pending review"

    response = client.post(f"/api/admin/content/{content['id']}/submit", headers=MANAGER)
    assert response.status_code == 200
    assert response.json()["content"]["status"] == "pending_review"

    response = client.post(f"/api/admin/content/{content['id']}/approve", headers=REVIEWER)
    assert response.status_code == 200
    approved = response.json()["content"]
    assert approved["status"] == "published"
    assert approved["reviewedBy"] == "21"
    assert approved["publishedAt"] is not None

    response = client.get("/api/content/public")
    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data["content"]] == [content["id"]]
    assert data["pagination"] == {"total": 1, "limit": 12, "skip": 0, "hasMore": False}


def test_rejection_returns_content_to_draft(client, db):
    content_id = create_content(client).json()["content"]["id"]
    client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)

    response = client.post(f"/api/admin/content/{content_id}/reject", json={"reason": "  "}, headers=REVIEWER)
    assert response.status_code == 400
    assert response.json()["error"] == "Rejection reason is required"

    response = client.post(f"/api/admin/content/{content_id}/reject",
                           json={"reason": "Image is blurry"}, headers=REVIEWER)
    assert response.status_code == 200
    rejected = response.json()["content"]
    assert rejected["status"] == "draft"
    assert rejected["rejectionReason"] == "Image is blurry"

    # Resubmitting clears the old reason
    response = client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)
    assert response.json()["content"]["rejectionReason"] is None


def test_only_drafts_can_be_submitted(client, db):
    content_id = create_content(client).json()["content"]["id"]
    client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)

    response = client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)
    assert response.status_code == 400
    assert response.json()["error"] == "Only draft content can be submitted for review"


def test_managers_only_touch_their_own_content(client, db):
    content_id = create_content(client).json()["content"]["id"]

    response = client.put(f"/api/admin/content/{content_id}", json={"title": "Mine now"}, headers=OTHER_MANAGER)
    assert response.status_code == 403
    response = client.get(f"/api/admin/content/{content_id}", headers=OTHER_MANAGER)
    assert response.status_code == 403
    response = client.get("/api/admin/content", headers=OTHER_MANAGER)
    assert response.json() == []

    response = client.delete(f"/api/admin/content/{content_id}", headers=OTHER_MANAGER)
    assert response.status_code == 403
    response = client.delete(f"/api/admin/content/{content_id}", headers=MANAGER)
    assert response.status_code == 200
    assert db.query(Content).count() == 0


def test_reviewers_cannot_author(client):
    response = create_content(client, headers=REVIEWER)
    assert response.status_code == 403


def test_managers_cannot_approve(client, db):
    content_id = create_content(client).json()["content"]["id"]
    client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)
    response = client.post(f"/api/admin/content/{content_id}/approve", headers=MANAGER)
    assert response.status_code == 403


def test_invalid_content_type(client):
    response = create_content(client, type="hologram")
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid content type")


def test_public_resources_are_grouped(client, db):
    db.add_all([
        Resource(title="The Calm Mind", type="book", author="A. Teacher"),
        Resource(title="Guided Breath", type="video", video_url="https://video.example.org/1"),
        Resource(title="Unreleased", type="book", status="draft"),
        Content(title="Changed my life", type="testimonial", status="published", created_by="1",
                content={"quote": "Peaceful"}),
    ])
    db.commit()

    response = client.get("/api/resources/public")
    assert response.status_code == 200
    data = response.json()
    assert [r["title"] for r in data["resources"]["books"]] == ["The Calm Mind"]
    assert len(data["resources"]["videos"]) == 1
    assert data["stats"]["testimonials"] == 1
    assert data["stats"]["books"] == 1


def test_video_resource_needs_url(client):
    response = client.post("/api/admin/resources", json={"title": "Talk", "type": "video"}, headers=MANAGER)
    assert response.status_code == 400
    assert response.json()["error"] == "Video URL is required for video resources"

    response = client.post("/api/admin/resources", json={
        "title": "Talk", "type": "video", "videoUrl": "https://video.example.org/2",
    }, headers=MANAGER)
    assert response.status_code == 201
    resource_id = response.json()["resource"]["id"]

    response = client.put(f"/api/admin/resources/{resource_id}", json={"title": "Renamed"}, headers=OTHER_MANAGER)
    assert response.status_code == 403
    response = client.put(f"/api/admin/resources/{resource_id}", json={"title": "Renamed"}, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["resource"]["title"] == "Renamed"


def test_admin_edits_and_reviews_any_content(client, db):
    content_id = create_content(client).json()["content"]["id"]

    response = client.put(f"/api/admin/content/{content_id}", json={"title": "Evening Sit"}, headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["content"]["title"] == "Evening Sit"

    client.post(f"/api/admin/content/{content_id}/submit", headers=MANAGER)
    response = client.post(f"/api/admin/content/{content_id}/approve", headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["content"]["status"] == "published"

    response = client.put(f"/api/admin/content/{content_id}", json={"title": "Mine"}, headers=REVIEWER)
    assert response.status_code == 403
