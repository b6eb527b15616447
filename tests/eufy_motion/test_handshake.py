from eufy_motion.codec import decode
from eufy_motion.handshake import HandshakeSequencer, HandshakeState, MessageIdCounter


def test_message_ids_increase_from_one():
    ids = MessageIdCounter()
    assert [ids.next(), ids.next(), ids.next()] == [1, 2, 3]
    assert ids.peek == 4


def test_full_handshake_sequence():
    seq = HandshakeSequencer()
    assert seq.state is HandshakeState.IDLE

    negotiate = seq.open()
    assert negotiate.command == "set_api_schema"
    assert negotiate.message_id == "1"
    assert negotiate.schema_version == 7
    assert seq.state is HandshakeState.AWAITING_SCHEMA_ACK

    listen = seq.on_message(decode('{"type": "result", "messageId": "1", "success": true}'))
    assert listen is not None
    assert listen.command == "start_listening"
    assert listen.message_id == "2"
    assert seq.state is HandshakeState.SUBSCRIBING

    seq.subscription_sent()
    assert seq.state is HandshakeState.STREAMING
    assert seq.streaming


def test_message_before_open_is_ignored():
    seq = HandshakeSequencer()
    assert seq.on_message(decode('{"messageId": "1"}')) is None
    assert seq.state is HandshakeState.IDLE


def test_other_message_ids_do_not_trigger_subscription():
    seq = HandshakeSequencer()
    seq.open()

    assert seq.on_message(decode('{"messageId": "5"}')) is None
    assert seq.on_message(decode('{"type": "event", "event": {}}')) is None
    assert seq.state is HandshakeState.AWAITING_SCHEMA_ACK


def test_duplicate_ack_subscribes_only_once():
    seq = HandshakeSequencer()
    seq.open()

    assert seq.on_message(decode('{"messageId": 1}')) is not None
    seq.subscription_sent()
    assert seq.on_message(decode('{"messageId": 1}')) is None
    assert seq.state is HandshakeState.STREAMING


def test_custom_schema_version_and_counter():
    seq = HandshakeSequencer(MessageIdCounter(start=10), schema_version=9)
    negotiate = seq.open()
    assert negotiate.message_id == "10"
    assert negotiate.schema_version == 9

    listen = seq.on_message(decode('{"messageId": "10"}'))
    assert listen.message_id == "11"
