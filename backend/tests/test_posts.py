"""
Tests for posts, shares and profile records
"""
import uuid
from datetime import date

import pytest

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.services.post_service import PostService, PostSharedService
from app.services.profile_service import (BlockService,
                                          ExperienceEducationService,
                                          InterestService,
                                          VisitorProfileProjectService)
from app.services.team_service import TeamService, TeamUserService


class TestPosts:

    def test_post_counter_on_user(self, db, make_user):
        author = make_user()
        service = PostService(db)

        post = service.create({"user_id": author.id, "title": "Launch", "content": "We are live"})
        db.refresh(author)
        assert author.nb_posts == 1

        service.remove(post.id)
        db.refresh(author)
        assert author.nb_posts == 0

    def test_unknown_author(self, db):
        with pytest.raises(NotFoundError):
            PostService(db).create({"user_id": uuid.uuid4(), "title": "x", "content": "y"})

    def test_public_posts_only(self, db, make_user, make_post):
        author = make_user()
        make_post(author, title="Visible")
        make_post(author, title="Hidden", is_public=False)

        assert [p.title for p in PostService(db).find_public_posts()] == ["Visible"]

    def test_shares_move_counter(self, db, make_user, make_post):
        post = make_post(make_user())
        service = PostSharedService(db)

        share = service.create({"post_id": post.id, "user_id": make_user().id, "description": "Worth a read"})
        db.refresh(post)
        assert post.nb_shares == 1

        service.remove(share.id)
        db.refresh(post)
        assert post.nb_shares == 0


class TestProfileRecords:

    def test_interest_once_per_sector(self, db, make_user, sector):
        user = make_user()
        service = InterestService(db)
        service.create({"user_id": user.id, "sector_id": sector.id})
        with pytest.raises(ConflictError):
            service.create({"user_id": user.id, "sector_id": sector.id})
        with pytest.raises(NotFoundError):
            service.create({"user_id": user.id, "sector_id": uuid.uuid4()})

    def test_experience_dates(self, db, make_user):
        user = make_user()
        with pytest.raises(BadRequestError):
            ExperienceEducationService(db).create({
                "user_id": user.id,
                "title": "CTO",
                "organization": "Acme",
                "start_date": date(2024, 1, 1),
                "end_date": date(2023, 1, 1),
            })

    def test_blocks(self, db, make_user):
        alice, bob = make_user(), make_user()
        service = BlockService(db)
        with pytest.raises(BadRequestError):
            service.create({"user_id": alice.id, "blocked_user_id": alice.id})
        service.create({"user_id": alice.id, "blocked_user_id": bob.id})
        assert service.is_blocked(alice.id, bob.id)
        assert not service.is_blocked(bob.id, alice.id)
        with pytest.raises(ConflictError):
            service.create({"user_id": alice.id, "blocked_user_id": bob.id})

    def test_visit_needs_a_target(self, db, make_user):
        with pytest.raises(BadRequestError):
            VisitorProfileProjectService(db).create({"user_visitor_id": make_user().id})

    def test_unknown_fields_are_rejected(self, db):
        service = TeamService(db)
        with pytest.raises(BadRequestError):
            service.create({"name": "Core", "bogus": 1})
        assert service.find_all() == []

        team = service.create({"name": "Core"})
        with pytest.raises(BadRequestError):
            service.update(team.id, {"name": "Renamed", "bogus": 1})
        db.refresh(team)
        assert team.name == "Core"

    def test_team_membership(self, db, make_user):
        team = TeamService(db).create({"name": "Core"})
        user = make_user()
        service = TeamUserService(db)
        service.create({"team_id": team.id, "user_id": user.id})
        with pytest.raises(ConflictError):
            service.create({"team_id": team.id, "user_id": user.id})
        assert len(service.find_by_team(team.id)) == 1


def test_post_routes(client, make_user, auth_headers):
    author, stranger = make_user(), make_user()

    payload = {"user_id": str(author.id), "title": "Seed round", "content": "Closing next month"}
    assert client.post("/api/v1/posts", json=payload).status_code == 401

    response = client.post("/api/v1/posts", json=payload, headers=auth_headers(author))
    assert response.status_code == 201
    post_id = response.json()["id"]

    response = client.delete(f"/api/v1/posts/{post_id}", headers=auth_headers(stranger))
    assert response.status_code == 403

    response = client.patch(
        f"/api/v1/posts/{post_id}",
        json={"is_public": False},
        headers=auth_headers(author),
    )
    assert response.json()["is_public"] is False
    assert client.get("/api/v1/posts/public").json() == []

    response = client.post("/api/v1/post-shared", json={"post_id": post_id, "user_id": str(stranger.id)})
    assert response.status_code == 201
    assert client.get(f"/api/v1/posts/{post_id}").json()["nb_shares"] == 1


def test_team_routes(client, make_user, auth_headers):
    user = make_user()
    assert client.post("/api/v1/team", json={"name": "Founders"}).status_code == 401
    team_id = client.post("/api/v1/team", json={"name": "Founders"}, headers=auth_headers(user)).json()["id"]

    response = client.post("/api/v1/team-users", json={"team_id": team_id, "user_id": str(user.id)})
    assert response.status_code == 201

    response = client.get(f"/api/v1/team-users/team/{team_id}")
    assert [member["user_id"] for member in response.json()] == [str(user.id)]
