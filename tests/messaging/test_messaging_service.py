from __future__ import annotations

import pytest

from zencorp.core.enums import Role
from zencorp.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from zencorp.messaging.service import MessageService
from zencorp.suggestions.service import SuggestionService

from fakes import InMemoryMessages, InMemorySuggestions, login_as


@pytest.fixture()
def messages() -> MessageService:
    ticks = iter(range(1000, 2000))
    return MessageService(InMemoryMessages(), clock=lambda: next(ticks))


def test_conversation_and_unread_counts(messages):
    messages.send(from_id="w1", to_id="hr-1", text="Hello")
    messages.send(from_id="w1", to_id="hr-1", text="Are you there?")
    messages.send(from_id="w2", to_id="hr-1", text="Hi")
    messages.send(from_id="hr-1", to_id="w1", text="Yes")

    assert messages.unread_counts(user_id="hr-1") == {"w1": 2, "w2": 1}
    thread = messages.conversation(user_id="hr-1", contact_id="w1")
    assert [m.text for m in thread] == ["Hello", "Are you there?", "Yes"]

    assert messages.mark_read(user_id="hr-1", contact_id="w1") == 2
    assert messages.unread_counts(user_id="hr-1") == {"w2": 1}


def test_send_rules(messages):
    with pytest.raises(ValidationError):
        messages.send(from_id="w1", to_id="w1", text="me")
    with pytest.raises(ValidationError):
        messages.send(from_id="w1", to_id="hr-1", text="   ")


def test_suggestion_reply_becomes_direct_message(messages):
    box = SuggestionService(InMemorySuggestions(), messages, clock=lambda: 42)
    suggestion = box.submit(author_id="w1", author_name="Aziz Karimov", text="More coffee")

    with pytest.raises(AuthorizationError):
        box.list_suggestions(current_role=Role.EMPLOYEE)
    assert [s.text for s in box.list_suggestions(current_role=Role.HR_HEAD)] == ["More coffee"]

    reply = box.reply(current_role=Role.DIRECTOR, from_id="dir-1", suggestion_id=suggestion.suggestion_id, text="Done")

    assert reply.to_id == "w1"
    assert reply.text == "RE: Suggestion - Done"
    assert messages.unread_counts(user_id="w1") == {"dir-1": 1}


def test_suggestion_delete_is_director_only(messages):
    box = SuggestionService(InMemorySuggestions(), messages)
    suggestion = box.submit(author_id="w1", author_name="Aziz Karimov", text="Standing desks")

    with pytest.raises(AuthorizationError):
        box.delete(current_role=Role.HR_HEAD, suggestion_id=suggestion.suggestion_id)
    box.delete(current_role=Role.DIRECTOR, suggestion_id=suggestion.suggestion_id)
    with pytest.raises(NotFoundError):
        box.reply(current_role=Role.DIRECTOR, from_id="dir-1", suggestion_id=suggestion.suggestion_id, text="ok")


def test_message_endpoints_require_login(client):
    assert client.get("/api/messages").status_code == 401

    login_as(client, user_id="w1", role=Role.EMPLOYEE, employee_id="w1")
    resp = client.post("/api/messages", json={"toId": "hr-1", "text": "Ping"})
    assert resp.status_code == 201
    assert resp.get_json()["message"]["fromId"] == "w1"
