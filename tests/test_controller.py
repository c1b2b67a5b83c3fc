"""Tests for the reply request controller state machine."""

import logging
from unittest.mock import MagicMock

import pytest

from replygen.controller import FAILURE_MESSAGE, InvalidTransitionError, ReplyController
from replygen.schema import ReplyRequest
from replygen.state import Failed, Idle, Pending, Succeeded


@pytest.fixture
def controller():
    ctrl = ReplyController()
    ctrl.set_email_content("Can we move our call to Friday?")
    return ctrl


@pytest.mark.parametrize("tone", ["", "professional", "casual", "friendly"])
def test_empty_email_disables_submission(tone):
    """No email text means no submission, whatever the tone."""
    ctrl = ReplyController()
    ctrl.set_tone(tone)
    assert ctrl.can_submit() is False
    assert ctrl.begin_submission() is None
    assert isinstance(ctrl.state, Idle)


def test_email_content_is_not_trimmed():
    ctrl = ReplyController()
    ctrl.set_email_content("   ")
    assert ctrl.draft["email_content"] == "   "
    assert ctrl.can_submit() is True


def test_submission_enabled_from_every_settled_state(controller):
    assert controller.can_submit()

    controller.submit(lambda payload: "ok")
    assert isinstance(controller.state, Succeeded)
    assert controller.can_submit()

    controller.submit(MagicMock(side_effect=RuntimeError("down")))
    assert isinstance(controller.state, Failed)
    assert controller.can_submit()


def test_begin_submission_builds_payload(controller):
    controller.set_tone("friendly")
    payload = controller.begin_submission()

    assert isinstance(payload, ReplyRequest)
    assert payload.model_dump() == {
        "emailContent": "Can we move our call to Friday?",
        "tone": "friendly",
    }
    assert isinstance(controller.state, Pending)


def test_second_click_while_pending_is_ignored(controller):
    """Only one request may be in flight; extra clicks are dropped, not queued."""
    assert controller.begin_submission() is not None
    assert controller.can_submit() is False
    assert controller.begin_submission() is None

    send = MagicMock(return_value="never")
    assert controller.submit(send) is False
    send.assert_not_called()
    assert isinstance(controller.state, Pending)


def test_draft_stays_editable_while_pending(controller):
    controller.begin_submission()
    controller.set_email_content("")
    controller.set_tone("casual")
    assert controller.draft == {"email_content": "", "tone": "casual"}
    assert controller.is_pending


def test_submit_sends_exactly_once(controller):
    send = MagicMock(return_value="Hello!")
    assert controller.submit(send) is True
    send.assert_called_once()
    assert send.call_args.args[0].emailContent == "Can we move our call to Friday?"


def test_string_body_passes_through(controller):
    controller.submit(lambda payload: "Hello!")
    assert controller.state == Succeeded(reply="Hello!")
    assert controller.reply == "Hello!"
    assert controller.error is None


def test_non_string_body_is_serialized(controller):
    controller.submit(lambda payload: {"msg": "hi"})
    assert controller.reply == '{"msg":"hi"}'


def test_failure_sets_fixed_message(controller, caplog):
    """Transport detail is logged, never shown."""
    caplog.set_level(logging.ERROR, logger="replygen.controller")
    controller.submit(MagicMock(side_effect=ConnectionError("connection refused on 10.0.0.1")))

    assert controller.state == Failed(message=FAILURE_MESSAGE)
    assert controller.error == "Failed to generate email reply. Please try again"
    assert controller.reply is None
    assert "connection refused on 10.0.0.1" in caplog.text
    assert "10.0.0.1" not in controller.error


def test_failure_replaces_previous_reply(controller):
    controller.submit(lambda payload: "first reply")
    controller.submit(MagicMock(side_effect=RuntimeError("boom")))
    assert controller.reply is None


def test_success_replaces_previous_reply(controller):
    controller.submit(lambda payload: "first reply")
    controller.submit(lambda payload: "second reply")
    assert controller.reply == "second reply"


def test_unserializable_body_fails(controller):
    controller.submit(lambda payload: object())
    assert controller.error == FAILURE_MESSAGE


def test_new_submission_clears_error_before_resolving(controller):
    controller.submit(MagicMock(side_effect=RuntimeError("boom")))
    assert controller.error == FAILURE_MESSAGE

    seen = {}

    def send(payload):
        seen["error"] = controller.error
        seen["state"] = controller.state
        return "fine"

    controller.submit(send)
    assert seen == {"error": None, "state": Pending()}
    assert controller.reply == "fine"


def test_outcome_outside_pending_raises(controller):
    with pytest.raises(InvalidTransitionError):
        controller.complete("late")
    with pytest.raises(InvalidTransitionError):
        controller.fail(RuntimeError("late"))


def test_unknown_tone_rejected():
    ctrl = ReplyController()
    with pytest.raises(ValueError):
        ctrl.set_tone("sarcastic")
    assert ctrl.draft["tone"] == ""


def test_listeners_see_every_transition(controller):
    kinds = []
    controller.subscribe(lambda c: kinds.append(c.state.kind))

    controller.submit(lambda payload: "ok")
    controller.submit(MagicMock(side_effect=RuntimeError("boom")))

    assert kinds == ["pending", "succeeded", "pending", "failed"]


def test_copy_without_reply_does_not_write(controller):
    clipboard = MagicMock()
    assert controller.copy_to_clipboard(clipboard) is False
    clipboard.setText.assert_not_called()

    controller.submit(MagicMock(side_effect=RuntimeError("boom")))
    assert controller.copy_to_clipboard(clipboard) is False
    clipboard.setText.assert_not_called()


def test_copy_writes_displayed_reply(controller):
    clipboard = MagicMock()
    controller.submit(lambda payload: "Sure, Friday works.\n\nBest,\nSam")

    assert controller.copy_to_clipboard(clipboard) is True
    clipboard.setText.assert_called_once_with("Sure, Friday works.\n\nBest,\nSam")
