import json
import logging

import pytest

from eufy_motion.codec import decode
from eufy_motion.dispatcher import EventDispatcher, MotionState
from eufy_motion.handshake import HandshakeSequencer

from fakes import motion_event

SERIAL = "T8210N0123"


@pytest.fixture
def dispatcher():
    return EventDispatcher(SERIAL, MotionState(), HandshakeSequencer())


def _frame(obj):
    return decode(json.dumps(obj))


def test_matching_event_sets_motion(dispatcher):
    assert dispatcher.handle(_frame(motion_event(SERIAL, True))) is None
    assert dispatcher.motion.value is True

    dispatcher.handle(_frame(motion_event(SERIAL, False)))
    assert dispatcher.motion.value is False


def test_other_device_is_ignored(dispatcher):
    dispatcher.handle(_frame(motion_event(SERIAL, True)))
    dispatcher.handle(_frame(motion_event("OTHER", False)))
    assert dispatcher.motion.value is True


@pytest.mark.parametrize(
    "event",
    [
        {"event": "property changed", "name": "personDetected", "serialNumber": SERIAL, "value": True},
        {"event": "motion detected", "name": "motionDetected", "serialNumber": SERIAL, "value": True},
        {"event": "property changed", "name": "motionDetected", "value": True},
    ],
)
def test_non_matching_events_do_not_touch_motion(dispatcher, event):
    dispatcher.handle(_frame({"type": "event", "event": event}))
    assert dispatcher.motion.value is False


def test_event_shape_without_event_type_is_ignored(dispatcher):
    dispatcher.handle(_frame({"type": "result", "event": motion_event(SERIAL, True)["event"]}))
    assert dispatcher.motion.value is False


@pytest.mark.parametrize("value, expected", [(1, True), (0, False), ("yes", True), ("", False), (None, False)])
def test_value_is_coerced_to_bool(dispatcher, value, expected):
    dispatcher.motion.set(not expected)
    dispatcher.handle(_frame(motion_event(SERIAL, value)))
    assert dispatcher.motion.value is expected


def test_ack_is_delegated_to_sequencer(dispatcher):
    dispatcher.sequencer.open()
    reply = dispatcher.handle(_frame({"type": "result", "messageId": "1", "success": True}))
    assert reply is not None
    assert reply.command == "start_listening"


def test_motion_change_is_logged(caplog):
    motion = MotionState()
    with caplog.at_level(logging.INFO, logger="eufy_motion.dispatcher"):
        motion.set(True)
        motion.set(True)

    changes = [r for r in caplog.records if "MotionState changed" in r.getMessage()]
    assert len(changes) == 1
    assert "from False to True" in changes[0].getMessage()
