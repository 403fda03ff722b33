"""
Tests for projects, sectors and project detail records
"""
import uuid

import pytest

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.services.project_detail_service import (ProjectTagService,
                                                 TagService, UseOfFundsService)
from app.services.project_service import ProjectService, SectorService
from conftest import project_payload


def project_json(creator, sector, **overrides):
    payload = project_payload(str(creator.id), str(sector.id), **overrides)
    payload["runway"] = payload["runway"].isoformat()
    return payload


class TestProjectService:

    def test_create_checks_references(self, db, make_user, sector):
        service = ProjectService(db)
        with pytest.raises(NotFoundError) as exc:
            service.create(project_payload(uuid.uuid4(), sector.id))
        assert exc.value.message.startswith("User with ID")

        with pytest.raises(NotFoundError) as exc:
            service.create(project_payload(make_user().id, uuid.uuid4()))
        assert exc.value.message.startswith("Sector with ID")

    def test_new_project_counters_start_at_zero(self, db, make_user, sector):
        project = ProjectService(db).create(project_payload(make_user().id, sector.id))
        assert (project.nb_likes, project.nb_offers, project.nb_connects, project.nb_views) == (0, 0, 0, 0)
        assert project.verified_project is False

    def test_search_and_by_creator(self, db, make_user, make_project):
        founder = make_user()
        make_project(creator=founder, title="Solar Grid")
        make_project(title="AgriDrone", project_location="Sousse")
        service = ProjectService(db)

        assert [p.title for p in service.search("sousse")] == ["AgriDrone"]
        assert [p.title for p in service.find_by_creator(founder.id)] == ["Solar Grid"]
        assert len(service.paginate(0, 1)) == 1
        with pytest.raises(BadRequestError):
            service.paginate(-1, 10)


class TestSectors:

    def test_unique_name_ignores_case(self, db):
        service = SectorService(db)
        service.create({"name": "Healthtech"})
        with pytest.raises(ConflictError):
            service.create({"name": "  HEALTHTECH "})

    def test_rename_to_existing(self, db, sector):
        service = SectorService(db)
        other = service.create({"name": "Edtech"})
        with pytest.raises(ConflictError):
            service.update(other.id, {"name": "fintech"})
        assert service.update(sector.id, {"name": "Fintech"}).name == "Fintech"

    def test_detailed(self, db, sector, make_project):
        make_project()
        make_project()
        detailed = SectorService(db).find_one_detailed(sector.id)
        assert detailed["project_count"] == 2
        assert detailed["interested_users_count"] == 0


class TestProjectDetails:

    def test_use_of_funds_capped_at_100(self, db, make_project):
        project = make_project()
        service = UseOfFundsService(db)
        service.create({"project_id": project.id, "title": "Hiring", "use_percentage": 60})
        marketing = service.create({"project_id": project.id, "title": "Marketing", "use_percentage": 40})

        with pytest.raises(BadRequestError):
            service.create({"project_id": project.id, "title": "Legal", "use_percentage": 1})
        with pytest.raises(BadRequestError):
            service.update(marketing.id, {"use_percentage": 41})
        assert service.update(marketing.id, {"use_percentage": 30}).use_percentage == 30

    def test_use_of_funds_unknown_project(self, db):
        with pytest.raises(NotFoundError):
            UseOfFundsService(db).create({"project_id": uuid.uuid4(), "title": "Hiring", "use_percentage": 10})

    def test_project_tags(self, db, make_project):
        project = make_project()
        tag = TagService(db).create({"name": "CleanTech"})
        with pytest.raises(ConflictError):
            TagService(db).create({"name": "cleantech"})

        service = ProjectTagService(db)
        service.create({"project_id": project.id, "tag_id": tag.id})
        with pytest.raises(ConflictError):
            service.create({"project_id": project.id, "tag_id": tag.id})
        assert len(service.find_by_project(project.id)) == 1


def test_project_routes(client, make_user, sector, auth_headers):
    founder, stranger = make_user(), make_user()

    response = client.post("/api/v1/projects", json=project_json(founder, sector))
    assert response.status_code == 201
    project_id = response.json()["id"]

    response = client.get(f"/api/v1/projects/{project_id}")
    assert response.status_code == 200
    body = response.json()
    assert body["sector"]["name"] == "Fintech"
    assert body["creator"]["id"] == str(founder.id)
    assert body["partnerships"] == []

    response = client.patch(f"/api/v1/projects/{project_id}", json={"title": "Hijack"})
    assert response.status_code == 401

    response = client.patch(
        f"/api/v1/projects/{project_id}",
        json={"title": "Hijack"},
        headers=auth_headers(stranger),
    )
    assert response.status_code == 403

    response = client.patch(
        f"/api/v1/projects/{project_id}",
        json={"title": "Solar Grid 2"},
        headers=auth_headers(founder),
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Solar Grid 2"

    response = client.delete(f"/api/v1/projects/{project_id}", headers=auth_headers(founder))
    assert response.status_code == 200
    assert client.get(f"/api/v1/projects/{project_id}").status_code == 404


def test_project_route_validation(client, make_user, sector):
    response = client.post(
        "/api/v1/projects",
        json=project_json(make_user(), sector, team_size=0, max_percentage=150),
    )
    assert response.status_code == 400
    messages = response.json()["message"]
    assert any(message.startswith("team_size") for message in messages)
    assert any(message.startswith("max_percentage") for message in messages)


def test_sector_routes(client, sector, make_user, auth_headers):
    assert client.post("/api/v1/sector", json={"name": "Biotech"}).status_code == 401

    response = client.post("/api/v1/sector", json={"name": "fintech"}, headers=auth_headers(make_user()))
    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"

    response = client.get(f"/api/v1/sector/{sector.id}/detailed")
    assert response.json()["sector"]["name"] == "Fintech"

    response = client.get("/api/v1/sector/search", params={"q": "fin"})
    assert [s["name"] for s in response.json()] == ["Fintech"]


def test_use_of_funds_routes(client, make_project, auth_headers):
    project = make_project()
    headers = auth_headers(project.creator)

    response = client.post("/api/v1/use-of-funds", json={
        "project_id": str(project.id),
        "title": "R&D",
        "use_percentage": 80,
    }, headers=headers)
    assert response.status_code == 201

    response = client.post("/api/v1/use-of-funds", json={
        "project_id": str(project.id),
        "title": "Ops",
        "use_percentage": 30,
    }, headers=headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Total use of funds for a project cannot exceed 100%"

    response = client.get(f"/api/v1/use-of-funds/project/{project.id}")
    assert len(response.json()) == 1


@pytest.mark.parametrize("path", [
    "/api/v1/connects",
    "/api/v1/sector",
    "/api/v1/team",
    "/api/v1/block",
    "/api/v1/experience-education",
    "/api/v1/social-media",
    "/api/v1/use-of-funds",
    "/api/v1/visitor-profile-project",
    "/api/v1/project-videos",
])
def test_protected_collections_reject_anonymous_writes(client, path):
    response = client.post(path, json={})
    assert response.status_code == 401
    assert response.json()["message"] == "Access token is required"

    response = client.delete(f"{path}/{uuid.uuid4()}")
    assert response.status_code == 401
