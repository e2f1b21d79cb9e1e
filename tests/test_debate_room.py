from types import SimpleNamespace
from unittest.mock import patch

import pytest

import schemas
from core.errors import AIResponseError, NotAuthenticatedError, RoomNotLoadedError, StoreError
from models import DebateParticipant, DebateVote
from services.debate_room import DebateContext, DebateRoomState, get_available_topics


# ----------------------------------------------------------------------
# create
# ----------------------------------------------------------------------
def test_create_room_defaults(state, user):
    room = state.create_debate_room(schemas.DebateRoomCreate(title="T", topic="Topic", mode="ai_vs_user"))

    assert room.creator_id == user.id
    assert room.status == "waiting"
    assert room.settings == {
        "chat_enabled": True,
        "voice_enabled": False,
        "voting_enabled": True,
        "feedback_enabled": True,
    }
    assert room.structure["rounds"] == ["opening", "rebuttal", "closing"]
    assert room.structure["round_duration"] == 120
    assert state.current_room is room
    assert state.notifier.last.title == "Debate Room Created"


def test_create_room_merges_setting_overrides(state):
    req = schemas.DebateRoomCreate(
        title="T",
        topic="Topic",
        settings=schemas.RoomSettingsPatch(voice_enabled=True, voting_enabled=False),
    )
    room = state.create_debate_room(req)

    assert room.settings == {
        "chat_enabled": True,
        "voice_enabled": True,
        "voting_enabled": False,
        "feedback_enabled": True,
    }


def test_create_room_requires_user(db):
    anon = DebateRoomState(DebateContext(db=db))
    with pytest.raises(NotAuthenticatedError):
        anon.create_debate_room(schemas.DebateRoomCreate(title="T", topic="Topic"))
    assert anon.current_room is None
    assert anon.notifier.last.description == "Failed to create debate room."
    assert anon.loading is False


def test_create_room_store_failure_notifies(state):
    with patch("crud.debate.create_room", side_effect=RuntimeError("db down")):
        with pytest.raises(StoreError) as exc:
            state.create_debate_room(schemas.DebateRoomCreate(title="T", topic="Topic"))
    assert str(exc.value) == "Failed to create debate room."
    assert "db down" not in str(exc.value)
    assert isinstance(exc.value.__cause__, RuntimeError)
    assert state.notifier.last.variant == "destructive"
    assert state.current_room is None


# ----------------------------------------------------------------------
# join
# ----------------------------------------------------------------------
def test_join_twice_same_side_keeps_both_rows(state, make_room, db):
    room = make_room()
    first = state.join_debate_room(room.id, "pro")
    second = state.join_debate_room(room.id, "pro")

    assert first.id != second.id
    assert len(state.participants) == 2
    stored = db.query(DebateParticipant).filter_by(debate_room_id=room.id).all()
    assert len(stored) == 2
    assert {p.participant_type for p in stored} == {"user"}
    assert state.notifier.last.description == "You joined as the pro side."


def test_join_with_bot_id(state, make_room):
    room = make_room()
    p = state.join_debate_room(room.id, "con", bot_id="bot-42")
    assert p.ai_bot_id == "bot-42"
    assert p.side == "con"


def test_add_ai_participant(state, make_room):
    room = make_room()
    ai = state.add_ai_participant(room.id, "con")
    assert ai.participant_type == "ai"
    assert ai.user_id is None
    assert state.find_participant("con", "ai") is ai


# ----------------------------------------------------------------------
# messages
# ----------------------------------------------------------------------
def test_send_message_requires_loaded_room(db, user):
    fresh = DebateRoomState(DebateContext(db=db, user=user))
    with pytest.raises(RoomNotLoadedError):
        fresh.send_message("hello", "opening", "nobody")


def test_send_message_appends(state, make_room):
    room = make_room()
    p = state.join_debate_room(room.id, "pro")
    msg = state.send_message("Teachers matter.", "opening", p.id)

    assert msg.debate_room_id == room.id
    assert msg.message_type == "text"
    assert state.messages == [msg]


async def test_generate_ai_response_uses_round_messages(state, make_room, openai_client):
    room = make_room()
    human = state.join_debate_room(room.id, "pro")
    state.send_message("Opening from pro.", "opening", human.id)
    state.send_message("Rebuttal from pro.", "rebuttal", human.id)

    text = await state.generate_ai_response("con", "rebuttal")

    assert text == "AI argument."
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    system = kwargs["messages"][0]["content"]
    assert "Opponent's argument: Rebuttal from pro." in system
    assert "Opening from pro." not in system
    assert kwargs["temperature"] == 0.8
    assert kwargs["max_tokens"] == 300


async def test_generate_ai_response_wraps_failures(state, make_room, openai_client):
    make_room()
    openai_client.chat.completions.create.side_effect = RuntimeError("upstream 500")
    with pytest.raises(AIResponseError):
        await state.generate_ai_response("con", "opening")


async def test_generate_ai_response_rejects_empty(state, make_room, openai_client):
    make_room()
    openai_client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="   "))]
    )
    with pytest.raises(AIResponseError):
        await state.generate_ai_response("pro", "closing")


# ----------------------------------------------------------------------
# votes
# ----------------------------------------------------------------------
def test_duplicate_votes_are_both_stored(state, make_room, db, user):
    room = make_room()
    state.submit_vote("tie")
    state.submit_vote("pro")

    rows = db.query(DebateVote).filter_by(debate_room_id=room.id, voter_id=user.id).all()
    assert sorted(v.side_voted for v in rows) == ["pro", "tie"]
    assert state.vote_results() == {"pro": 1, "con": 0, "tie": 1}


def test_vote_requires_room(db, user):
    fresh = DebateRoomState(DebateContext(db=db, user=user))
    with pytest.raises(RoomNotLoadedError):
        fresh.submit_vote("pro")
    assert fresh.notifier.last.description == "Failed to submit vote."


# ----------------------------------------------------------------------
# fetch
# ----------------------------------------------------------------------
def test_fetch_missing_room_notifies_and_keeps_none(db, user):
    fresh = DebateRoomState(DebateContext(db=db, user=user))
    assert fresh.fetch_debate_room("does-not-exist") is None
    assert fresh.current_room is None
    assert fresh.notifier.last.description == "Failed to load debate room."
    assert fresh.loading is False


def test_fetch_replaces_local_state(state, make_room, db, user):
    room = make_room()
    p = state.join_debate_room(room.id, "pro")
    state.send_message("one", "opening", p.id)
    state.submit_vote("pro")

    other = DebateRoomState(DebateContext(db=db, user=user))
    assert other.fetch_debate_room(room.id).id == room.id
    assert [x.id for x in other.participants] == [p.id]
    assert [m.content for m in other.messages] == ["one"]
    assert len(other.votes) == 1


def test_fetch_failure_midway_leaves_state_untouched(state, make_room):
    room = make_room()
    state.join_debate_room(room.id, "pro")
    before = list(state.participants)

    with patch("crud.debate.get_messages", side_effect=RuntimeError("boom")):
        assert state.fetch_debate_room(room.id) is None

    assert state.participants == before
    assert state.current_room is room


# ----------------------------------------------------------------------
# status / listing / topics
# ----------------------------------------------------------------------
def test_status_transitions_stamp_times(state, make_room):
    make_room()
    room = state.update_room_status("active")
    assert room.status == "active" and room.started_at is not None
    room = state.update_room_status("completed")
    assert room.status == "completed" and room.ended_at is not None


def test_list_public_rooms_filters(state, make_room):
    make_room(title="Crypto", topic="Cryptocurrency will replace cash", mode="user_vs_user")
    make_room(title="Space", topic="Space exploration is a waste", mode="ai_vs_ai")
    make_room(title="Hidden", topic="Private stuff", room_type="private")

    assert {r.title for r in state.list_public_rooms()} == {"Crypto", "Space"}
    assert [r.title for r in state.list_public_rooms(search="CRYPTO")] == ["Crypto"]
    assert [r.title for r in state.list_public_rooms(mode="ai_vs_ai")] == ["Space"]
    assert state.list_public_rooms(status="active") == []
    assert len(state.list_public_rooms(mode="all", status="all")) == 2


def test_search_treats_wildcards_literally(state, make_room):
    make_room(title="50% off", topic="Discounts")
    make_room(title="500 club", topic="Numbers")
    make_room(title="snake_case", topic="Naming")
    make_room(title="snakeXcase", topic="Naming too")

    assert [r.title for r in state.list_public_rooms(search="50%")] == ["50% off"]
    assert [r.title for r in state.list_public_rooms(search="snake_")] == ["snake_case"]


def test_blank_text_rejected():
    with pytest.raises(ValueError):
        schemas.DebateRoomCreate(title="   ", topic="Topic")
    with pytest.raises(ValueError):
        schemas.MessageCreate(content=" \n ", round_type="opening", participant_id="p1")


def test_available_topics_fixed(state, make_room):
    before = get_available_topics()
    make_room()
    assert len(before) == 8
    assert state.get_available_topics() == before
    assert before[0] == "Artificial Intelligence should replace human teachers"
