"""
Tests for offer and connect services: rows and counters move together
"""
import uuid
from unittest.mock import patch

import pytest
from sqlalchemy import func

from app.core.errors import NotFoundError
from app.models.offer import Connect, Offer, OfferStatus
from app.services.connect_service import ConnectService
from app.services.counter_service import CounterService
from app.services.offer_service import OfferService


def offer_data(user, project, amount=1000.0, **extra):
    data = {"user_id": user.id, "project_id": project.id, "amount": amount, "equity": 5.0}
    data.update(extra)
    return data


def test_create_offer_increments_counters(db, make_user, make_project):
    investor = make_user()
    project = make_project()

    offer = OfferService(db).create(offer_data(investor, project))

    db.refresh(investor)
    db.refresh(project)
    assert offer.status == OfferStatus.PENDING.value
    assert investor.nb_offer == 1
    assert project.nb_offers == 1


def test_create_offer_unknown_project_persists_nothing(db, make_user):
    investor = make_user()

    with pytest.raises(NotFoundError):
        OfferService(db).create({
            "user_id": investor.id,
            "project_id": uuid.uuid4(),
            "amount": 10.0,
            "equity": 1.0,
        })

    db.refresh(investor)
    assert db.query(func.count(Offer.id)).scalar() == 0
    assert investor.nb_offer == 0


def test_create_offer_rolls_back_when_counter_update_fails(db, make_user, make_project):
    investor = make_user()
    project = make_project()
    real_adjust = CounterService.adjust
    calls = []

    def failing_adjust(self, target, entity_id, field, delta):
        calls.append(field)
        if field == "nb_offers":
            raise RuntimeError("counter update failed")
        return real_adjust(self, target, entity_id, field, delta)

    with patch.object(CounterService, "adjust", failing_adjust):
        with pytest.raises(RuntimeError):
            OfferService(db).create(offer_data(investor, project))

    db.refresh(investor)
    db.refresh(project)
    assert calls == ["nb_offer", "nb_offers"]
    assert db.query(func.count(Offer.id)).scalar() == 0
    assert investor.nb_offer == 0
    assert project.nb_offers == 0


def test_remove_offer_decrements_and_clamps_at_zero(db, make_user, make_project):
    investor = make_user()
    project = make_project()
    service = OfferService(db)
    offer = service.create(offer_data(investor, project))

    # Simulate a drifted counter
    project.nb_offers = 0
    db.commit()

    service.remove(offer.id)

    db.refresh(investor)
    db.refresh(project)
    assert investor.nb_offer == 0
    assert project.nb_offers == 0
    assert service.get(offer.id) is None


def test_remove_missing_offer(db):
    with pytest.raises(NotFoundError):
        OfferService(db).remove(uuid.uuid4())


def test_offer_stats(db, make_user, make_project):
    investor = make_user()
    project = make_project()
    service = OfferService(db)
    service.create(offer_data(investor, project, amount=1000.0))
    service.create(offer_data(investor, project, amount=3000.0, status=OfferStatus.ACCEPTED))

    user_stats = service.get_user_offer_stats(investor.id)
    assert user_stats["total_offers"] == 2
    assert user_stats["pending_offers"] == 1
    assert user_stats["accepted_offers"] == 1
    assert user_stats["rejected_offers"] == 0
    assert user_stats["total_amount"] == 4000.0
    assert user_stats["average_amount"] == 2000.0

    project_stats = service.get_project_offer_stats(project.id)
    assert project_stats["total_offers"] == 2
    assert project_stats["highest_offer"] == 3000.0


def test_offer_stats_without_offers(db, make_user):
    stats = OfferService(db).get_user_offer_stats(make_user().id)
    assert stats["total_offers"] == 0
    assert stats["average_amount"] == 0.0


def test_connect_counters(db, make_user, make_project):
    user = make_user()
    project = make_project()
    service = ConnectService(db)

    connect = service.create({"user_id": user.id, "project_id": project.id})
    db.refresh(user)
    db.refresh(project)
    assert user.nb_connects == 1
    assert project.nb_connects == 1

    service.remove(connect.id)
    db.refresh(user)
    db.refresh(project)
    assert user.nb_connects == 0
    assert project.nb_connects == 0
    assert db.query(func.count(Connect.id)).scalar() == 0


def test_offer_routes(client, make_user, make_project):
    investor = make_user()
    project = make_project()

    response = client.post("/api/v1/offer", json={
        "user_id": str(investor.id),
        "project_id": str(project.id),
        "amount": 500,
        "equity": 2.5,
    })
    assert response.status_code == 201
    offer_id = response.json()["id"]

    response = client.get(f"/api/v1/offer/user/{investor.id}")
    assert response.status_code == 200
    offers = response.json()
    assert len(offers) == 1
    assert offers[0]["project"]["title"] == project.title

    response = client.get(f"/api/v1/offer/project/{project.id}")
    summary = response.json()[0]["user"]
    assert summary["id"] == str(investor.id)
    assert summary["email"] == investor.email
    assert summary["name"] == investor.name

    response = client.get(f"/api/v1/offer/project/{project.id}/stats")
    assert response.json()["total_offers"] == 1

    response = client.delete(f"/api/v1/offer/{offer_id}")
    assert response.status_code == 200

    response = client.get(f"/api/v1/offer/{offer_id}")
    assert response.status_code == 404
    body = response.json()
    assert body["statusCode"] == 404
    assert body["error"] == "Not Found"


def test_offer_route_validation_error(client, make_user, make_project):
    response = client.post("/api/v1/offer", json={
        "user_id": str(make_user().id),
        "project_id": str(make_project().id),
        "amount": -1,
        "equity": 2,
    })
    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert body["error"] == "Bad Request"
    assert any(message.startswith("amount") for message in body["message"])


def test_connect_routes_require_token(client, make_user, make_project, auth_headers):
    investor = make_user()
    project = make_project()
    payload = {"user_id": str(investor.id), "project_id": str(project.id)}

    response = client.post("/api/v1/connects", json=payload)
    assert response.status_code == 401
    assert client.get(f"/api/v1/connects/project/{project.id}").json() == []

    response = client.post("/api/v1/connects", json=payload, headers=auth_headers(investor))
    assert response.status_code == 201
    connect_id = response.json()["id"]

    response = client.get(f"/api/v1/connects/project/{project.id}")
    assert response.json()[0]["user"]["email"] == investor.email

    assert client.patch(f"/api/v1/connects/{connect_id}", json={"connect_status": "ACCEPTED"}).status_code == 401
    assert client.delete(f"/api/v1/connects/{connect_id}").status_code == 401

    response = client.delete(f"/api/v1/connects/{connect_id}", headers=auth_headers(investor))
    assert response.status_code == 200
