import pytest

from core.errors import AIResponseError
from services.debate_view import DebateRoomView, take_ai_turn


@pytest.fixture
def view(state, make_room):
    room = make_room(mode="ai_vs_user")
    state.add_ai_participant(room.id, "con")
    v = DebateRoomView(state, room.id)
    v.load()
    return v


def test_start_round_activates_waiting_room(view, state):
    assert state.current_room.status == "waiting"
    view.start_round()
    assert state.current_room.status == "active"
    assert view.timer.is_active
    assert view.time_display == "2:00"


def test_can_participate_needs_join_and_active_room(view):
    assert not view.can_participate
    view.join("pro")
    assert not view.can_participate
    view.start_round()
    assert view.can_participate


async def test_send_argument_triggers_ai_rebuttal(view, state, openai_client):
    view.join("pro")
    view.start_round()

    msg = await view.send_argument("  Teachers build character.  ")

    assert msg.content == "Teachers build character."
    assert [m.content for m in view.messages_for_round("opening", "pro")] == ["Teachers build character."]
    assert [m.content for m in view.messages_for_round("opening", "con")] == ["AI argument."]
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert "arguing the con side" in kwargs["messages"][0]["content"]


async def test_ai_failure_keeps_human_message(view, state, openai_client):
    openai_client.chat.completions.create.side_effect = RuntimeError("timeout")
    view.join("pro")
    view.start_round()

    msg = await view.send_argument("My point.")

    assert msg is not None
    assert [m.content for m in state.messages] == ["My point."]
    assert state.notifier.last.description == "Failed to generate AI response."


async def test_send_argument_ignored_before_join_or_blank(view, state):
    assert await view.send_argument("hello") is None
    view.join("pro")
    assert await view.send_argument("   ") is None
    assert state.messages == []


async def test_no_ai_turn_in_user_vs_user(state, make_room, openai_client):
    room = make_room(mode="user_vs_user")
    state.add_ai_participant(room.id, "con")
    v = DebateRoomView(state, room.id)
    v.load()
    v.join("pro")

    await v.send_argument("Only humans here.")

    openai_client.chat.completions.create.assert_not_called()
    assert len(state.messages) == 1


async def test_take_ai_turn_without_ai_seat(state, make_room, openai_client):
    make_room(mode="ai_vs_user")
    assert await take_ai_turn(state, "pro", "opening") is None
    openai_client.chat.completions.create.assert_not_called()


async def test_take_ai_turn_propagates_ai_errors(view, openai_client):
    openai_client.chat.completions.create.side_effect = RuntimeError("down")
    with pytest.raises(AIResponseError):
        await take_ai_turn(view.state, "pro", "opening")


def test_full_debate_then_vote(view, state):
    view.join("con")
    for _ in range(3):
        view.start_round()
        view.tick(120)

    assert view.show_voting
    assert state.current_room.status == "completed"
    assert any(n.title == "Debate Completed" for n in state.notifier.notifications)

    assert view.vote() is None  # nothing selected yet
    view.select_vote("tie")
    view.vote()
    view.select_vote("pro")
    view.vote()
    assert view.vote_results() == {"pro": 1, "con": 0, "tie": 1}


def test_join_failure_leaves_side_unset(db, make_room, engine):
    from services.debate_room import DebateContext, DebateRoomState

    room = make_room()
    anon = DebateRoomState(DebateContext(db=db, engine=engine))
    v = DebateRoomView(anon, room.id)
    assert v.join("pro") is None
    assert v.user_side is None
