"""
Unit tests for CounterService
"""
import uuid

import pytest

from app.core.errors import BadRequestError, NotFoundError
from app.models.interaction import Like
from app.models.offer import Offer
from app.services.counter_service import CounterService, CounterTarget


def test_increment_and_clamped_decrement(db, make_project):
    project = make_project()
    counters = CounterService(db)

    counters.update_like_count(CounterTarget.PROJECT, project.id, True)
    db.commit()
    db.refresh(project)
    assert project.nb_likes == 1

    counters.update_like_count(CounterTarget.PROJECT, project.id, False)
    counters.update_like_count(CounterTarget.PROJECT, project.id, False)
    db.commit()
    db.refresh(project)
    assert project.nb_likes == 0


def test_counter_changes_roll_back_with_transaction(db, make_post, make_user):
    post = make_post(make_user())
    counters = CounterService(db)

    counters.update_share_count(post.id, True)
    db.rollback()

    db.refresh(post)
    assert post.nb_shares == 0


def test_unsupported_counter_target(db, make_user):
    user = make_user()
    with pytest.raises(BadRequestError):
        CounterService(db).update_like_count(CounterTarget.USER, user.id, True)


def test_unknown_field(db, make_user):
    with pytest.raises(BadRequestError):
        CounterService(db).adjust(CounterTarget.USER, make_user().id, "nb_unicorns", 1)


def test_missing_row(db):
    with pytest.raises(NotFoundError):
        CounterService(db).update_view_count(CounterTarget.VIDEO, uuid.uuid4(), True)


def test_recalculate_project_counters(db, make_user, make_project):
    project = make_project()
    fan = make_user()
    investor = make_user()
    db.add(Like(user_id=fan.id, project_id=project.id))
    db.add(Offer(user_id=investor.id, project_id=project.id, amount=10, equity=1))
    project.nb_likes = 7
    project.nb_offers = 0
    db.commit()

    values = CounterService(db).recalculate_counters(CounterTarget.PROJECT, project.id)

    db.refresh(project)
    assert values == {"nb_likes": 1, "nb_comments": 0, "nb_connects": 0, "nb_offers": 1}
    assert project.nb_likes == 1
    assert project.nb_offers == 1


def test_recalculate_video_not_supported(db, make_project, make_video):
    video = make_video(make_project())
    with pytest.raises(BadRequestError):
        CounterService(db).recalculate_counters(CounterTarget.VIDEO, video.id)


def test_recalculate_route_requires_token(client, make_project):
    project = make_project()
    response = client.post(f"/api/v1/counters/recalculate/project/{project.id}")
    assert response.status_code == 401
    assert response.json()["message"] == "Access token is required"


def test_recalculate_route(client, make_user, make_project, auth_headers):
    user = make_user()
    project = make_project(creator=user)
    response = client.post(
        f"/api/v1/counters/recalculate/project/{project.id}",
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    assert response.json()["nb_likes"] == 0


def test_recalculate_all_route(client, db, make_user, make_project, make_post, auth_headers):
    user = make_user()
    project = make_project(creator=user)
    post = make_post(user)
    project.nb_likes = 7
    post.nb_shares = 3
    db.commit()

    response = client.post("/api/v1/counters/recalculate/all", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"projects": 1, "posts": 1, "comments": 0}
    db.refresh(project)
    db.refresh(post)
    assert project.nb_likes == 0
    assert post.nb_shares == 0

    assert client.post("/api/v1/counters/recalculate/all").status_code == 401
