from helpers import auth_headers
from models.about_page import AboutPage

FOUNDER = {
    "name": "Meera Shah",
    "title": "Founder",
    "role": "founder",
    "imageUrl": "https://cdn.example.org/meera.jpg",
}


def test_empty_about_page(client, db):
    response = client.get("/api/about")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "whoWeAre": None,
            "visionMission": None,
            "teamMembers": [],
            "coreValues": [],
            "services": [],
            "partners": [],
            "inspiration": None,
            "globalReach": None,
        },
    }

    response = client.get("/api/about", params={"section": "partners"})
    assert response.json() == {"success": True, "data": []}


def test_unknown_section(client):
    response = client.get("/api/about", params={"section": "secrets"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid section")


def test_update_and_read_sections(client, db):
    response = client.put("/api/admin/about", json={
        "whoWeAre": {"title": "Who we are", "description": "Meditators in business"},
        "teamMembers": [FOUNDER],
    }, headers=auth_headers("content_manager"))
    assert response.status_code == 200
    assert response.json()["data"]["teamMembers"][0]["imageUrl"] == FOUNDER["imageUrl"]

    # A second update only replaces the sections it names
    response = client.put("/api/admin/about", json={
        "visionMission": {"vision": "Calm leaders", "mission": "Teach meditation"},
    }, headers=auth_headers())
    assert response.status_code == 200
    assert db.query(AboutPage).count() == 1

    response = client.get("/api/about")
    data = response.json()["data"]
    assert data["whoWeAre"]["title"] == "Who we are"
    assert data["visionMission"]["mission"] == "Teach meditation"
    assert data["coreValues"] == []

    response = client.get("/api/about", params={"section": "teamMembers"})
    assert [member["name"] for member in response.json()["data"]] == ["Meera Shah"]


def test_about_update_is_validated(client):
    response = client.put("/api/admin/about", json={
        "teamMembers": [dict(FOUNDER, role="intern")],
    }, headers=auth_headers())
    assert response.status_code == 400

    response = client.put("/api/admin/about", json={"whoWeAre": {"title": "Only a title"}}, headers=auth_headers())
    assert response.status_code == 400
    assert response.json()["error"] == "description is required"


def test_reviewers_cannot_edit_about_page(client):
    response = client.put("/api/admin/about", json={"partners": []}, headers=auth_headers("content_reviewer"))
    assert response.status_code == 403
