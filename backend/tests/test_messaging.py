"""
Tests for discussions, messages and notifications
"""
import uuid

import pytest

from app.core.errors import (BadRequestError, ConflictError, ForbiddenError,
                             NotFoundError)
from app.models.messaging import DiscussionType, Notification, NotificationType
from app.services.discussion_service import DiscussionService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService


@pytest.fixture
def pair(make_user):
    return make_user(name="Alice"), make_user(name="Bob")


def open_discussion(db, sender, receiver, **extra):
    data = {"receiver_id": receiver.id}
    data.update(extra)
    return DiscussionService(db).create_discussion(sender.id, data)


class TestDiscussions:

    def test_create_private(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        assert discussion.type == DiscussionType.PRIVATE.value
        assert discussion.project_id is None

    def test_cannot_talk_to_yourself(self, db, pair):
        alice, _ = pair
        with pytest.raises(BadRequestError):
            open_discussion(db, alice, alice)

    def test_unknown_receiver(self, db, pair):
        alice, _ = pair
        with pytest.raises(NotFoundError):
            DiscussionService(db).create_discussion(alice.id, {"receiver_id": uuid.uuid4()})

    def test_project_discussion_needs_project(self, db, pair):
        alice, bob = pair
        with pytest.raises(NotFoundError):
            open_discussion(db, alice, bob, type=DiscussionType.PROJECT, project_id=uuid.uuid4())

    def test_duplicate_in_either_direction(self, db, pair):
        alice, bob = pair
        open_discussion(db, alice, bob)
        with pytest.raises(ConflictError):
            open_discussion(db, bob, alice)

    def test_project_discussion_is_separate(self, db, pair, make_project):
        alice, bob = pair
        project = make_project(creator=bob)
        open_discussion(db, alice, bob)
        discussion = open_discussion(db, alice, bob, type=DiscussionType.PROJECT, project_id=project.id)

        assert discussion.project_id == project.id
        assert [d.id for d in DiscussionService(db).get_project_discussions(project.id)] == [discussion.id]

    def test_only_participants_can_read(self, db, pair, make_user):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        service = DiscussionService(db)

        assert service.get_discussion_by_id(discussion.id, bob.id).id == discussion.id
        with pytest.raises(ForbiddenError):
            service.get_discussion_by_id(discussion.id, make_user().id)

    def test_only_creator_deletes(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        service = DiscussionService(db)

        with pytest.raises(ForbiddenError):
            service.delete_discussion(discussion.id, bob.id)
        service.delete_discussion(discussion.id, alice.id)
        assert service.get(discussion.id) is None

    def test_search_by_other_participant(self, db, pair, make_user):
        alice, bob = pair
        carol = make_user(name="Carol")
        open_discussion(db, alice, bob)
        open_discussion(db, carol, alice)
        service = DiscussionService(db)

        assert len(service.search_discussions(alice.id, None)) == 2
        found = service.search_discussions(alice.id, "car")
        assert [d.sender_id for d in found] == [carol.id]

    def test_user_discussions_carry_last_message(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        messages = MessageService(db)
        messages.send_message(alice.id, {"discussion_id": discussion.id, "content": "first"})
        messages.send_message(bob.id, {"discussion_id": discussion.id, "content": "second"})

        items = DiscussionService(db).get_user_discussions(alice.id)
        assert len(items) == 1
        assert items[0]["last_message"].content == "second"


class TestMessages:

    def test_send_notifies_other_participant(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)

        message = MessageService(db).send_message(alice.id, {"discussion_id": discussion.id, "content": "  hello  "})

        assert message.content == "hello"
        notification = db.query(Notification).filter(Notification.user_id == bob.id).one()
        assert notification.type == NotificationType.NEW_MESSAGE.value
        assert "Alice" in notification.message

    def test_outsider_cannot_send(self, db, pair, make_user):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        with pytest.raises(ForbiddenError):
            MessageService(db).send_message(make_user().id, {"discussion_id": discussion.id, "content": "hi"})

    def test_empty_content(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        with pytest.raises(BadRequestError):
            MessageService(db).send_message(alice.id, {"discussion_id": discussion.id, "content": "   "})

    def test_pagination(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        service = MessageService(db)
        for i in range(5):
            service.send_message(alice.id, {"discussion_id": discussion.id, "content": f"message {i}"})

        page = service.get_discussion_messages(discussion.id, bob.id, page=2, limit=2)

        assert len(page["messages"]) == 2
        assert page["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}

    def test_only_sender_edits(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        service = MessageService(db)
        message = service.send_message(alice.id, {"discussion_id": discussion.id, "content": "draft"})

        with pytest.raises(ForbiddenError):
            service.update_message(message.id, bob.id, "hijacked")
        assert service.update_message(message.id, alice.id, "final").content == "final"

        with pytest.raises(ForbiddenError):
            service.delete_message(message.id, bob.id)
        service.delete_message(message.id, alice.id)
        assert service.get(message.id) is None

    def test_search_and_recent(self, db, pair):
        alice, bob = pair
        discussion = open_discussion(db, alice, bob)
        service = MessageService(db)
        service.send_message(alice.id, {"discussion_id": discussion.id, "content": "Term sheet attached"})
        service.send_message(bob.id, {"discussion_id": discussion.id, "content": "Thanks"})

        found = service.search_messages(discussion.id, bob.id, "term")
        assert [m.content for m in found] == ["Term sheet attached"]
        assert len(service.get_user_recent_messages(bob.id)) == 2


class TestNotifications:

    def test_unread_and_mark_all(self, db, make_user):
        user = make_user()
        service = NotificationService(db)
        first = service.notify(user.id, NotificationType.NEW_OFFER, "You got an offer")
        service.notify(user.id, NotificationType.OTHER, "Welcome")

        assert len(service.find_unread_notifications(user.id)) == 2
        assert service.mark_as_read(first.id).is_read is True
        assert len(service.find_unread_notifications(user.id)) == 1

        assert service.mark_all_as_read(user.id) == {"updated": 1}
        assert service.find_unread_notifications(user.id) == []
        assert len(service.find_user_notifications(user.id)) == 2


def test_messaging_routes(client, make_user, auth_headers):
    alice, bob = make_user(name="Alice"), make_user(name="Bob")

    response = client.post("/api/v1/discussion", json={"receiver_id": str(bob.id)}, headers=auth_headers(alice))
    assert response.status_code == 201
    discussion_id = response.json()["id"]

    response = client.post("/api/v1/discussion", json={"receiver_id": str(alice.id)}, headers=auth_headers(bob))
    assert response.status_code == 409

    response = client.post(
        "/api/v1/message",
        json={"discussion_id": discussion_id, "content": "hello"},
        headers=auth_headers(alice),
    )
    assert response.status_code == 201

    response = client.get(f"/api/v1/message/discussion/{discussion_id}", headers=auth_headers(bob))
    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 1

    assert client.get(f"/api/v1/notification/user/{bob.id}/unread").status_code == 401
    response = client.get(f"/api/v1/notification/user/{bob.id}/unread", headers=auth_headers(bob))
    assert len(response.json()) == 1

    response = client.put(f"/api/v1/notification/user/{bob.id}/mark-all-read", headers=auth_headers(bob))
    assert response.json() == {"updated": 1}

    response = client.get("/api/v1/discussion/my-discussions", headers=auth_headers(bob))
    assert response.json()[0]["last_message"]["content"] == "hello"


def test_message_route_rejects_oversized_content(client, make_user, auth_headers):
    alice = make_user()
    response = client.post(
        "/api/v1/message",
        json={"discussion_id": str(uuid.uuid4()), "content": "x" * 2001},
        headers=auth_headers(alice),
    )
    assert response.status_code == 400
