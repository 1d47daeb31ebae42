from __future__ import annotations

from datetime import UTC, datetime

import pytest

from instarelay.domain.model import Chat, Like, Message, User, as_id


@pytest.mark.parametrize(
    ("value", "expected"),
    [(123, "123"), (" 45 ", "45"), ("", None), (None, None), (True, None), (1.5, None)],
)
def test_as_id(value: object, expected: str | None) -> None:
    assert as_id(value) == expected


def test_entities_compare_by_type_and_id() -> None:
    assert User(id="1") == User(id="1", username="other")
    assert User(id="1") != Chat(id="1")
    assert len({User(id="1"), User(id="1"), Chat(id="1")}) == 2


def test_user_patch_only_touches_present_fields() -> None:
    user = User.from_payload({"pk": 42, "username": "alice", "full_name": "Alice"})

    user.patch({"follower_count": 10})

    assert user.id == "42"
    assert user.username == "alice"
    assert user.follower_count == 10
    assert user.display_name == "Alice"


def test_user_display_name_falls_back() -> None:
    assert User(id="7").display_name == "7"
    assert User(id="7", username="seven").display_name == "seven"


def test_message_parses_upstream_item() -> None:
    message = Message.from_payload(
        "1",
        {
            "item_id": "29",
            "item_type": "text",
            "user_id": 100,
            "timestamp": "1700000000000000",
            "text": "hello",
            "reactions": {"likes": [{"sender_id": 200, "timestamp": 1}, {"bad": True}]},
        },
    )

    assert message.author_id == "100"
    assert message.sent_at == datetime.fromtimestamp(1_700_000_000, tz=UTC)
    assert message.likes == [Like(user_id="200", timestamp=1)]
    assert message.liker_ids == ("200",)
    assert message.is_system is False


def test_message_link_text_is_used_as_content() -> None:
    message = Message.from_payload(
        "1", {"item_id": "30", "item_type": "link", "link": {"text": "see https://x.test"}}
    )

    assert message.content == "see https://x.test"


def test_message_requires_item_id() -> None:
    with pytest.raises(ValueError, match="item_id"):
        Message.from_payload("1", {"text": "no id"})


def test_chat_patch_maps_thread_fields() -> None:
    chat = Chat.from_payload(
        "1",
        {
            "thread_title": "Team",
            "users": [{"pk": 100}, {"pk": 200}, {"username": "no pk"}],
            "left_users": [{"pk": 300}],
            "admin_user_ids": [100],
            "is_group": True,
            "video_call_id": 555,
            "items": [{"item_id": "9", "item_type": "text", "text": "hi"}],
        },
    )

    assert chat.name == "Team"
    assert chat.member_ids == ["100", "200"]
    assert chat.left_member_ids == ["300"]
    assert chat.admin_ids == ["100"]
    assert chat.is_group is True
    assert chat.calling is True
    assert chat.call_id == "555"
    assert list(chat.messages) == ["9"]
    assert chat.snapshot().member_ids == ("100", "200")


def test_chat_items_patch_existing_messages() -> None:
    chat = Chat.from_payload("1", {"items": [{"item_id": "9", "text": "draft"}]})
    message = chat.messages["9"]

    chat.patch({"items": [{"item_id": "9", "text": "final"}]})

    assert chat.messages["9"] is message
    assert message.content == "final"


def test_admin_helpers_are_idempotent() -> None:
    chat = Chat(id="1", admin_ids=["100"])

    chat.add_admin("100")
    chat.add_admin("200")
    chat.remove_admin("300")
    chat.remove_admin("100")

    assert chat.admin_ids == ["200"]
