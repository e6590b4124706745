import asyncio

import pytest
from pymongo.errors import DuplicateKeyError

from careerhub.core.errors import InvalidRequestError
from careerhub.db.mongodb import init_mongo_indexes
from careerhub.services.message_service import MessageService, canonical_pair, pair_key

from tests.conftest import FakeSocket

ALICE = "65a000000000000000000001"
BOB = "65a000000000000000000002"
CAROL = "65a000000000000000000003"


@pytest.fixture
def service(db, hub):
    init_mongo_indexes(db)
    return MessageService(hub, db)


def _send(service, sender, receiver, body):
    return asyncio.run(service.send(sender, receiver, body))


def test_canonical_pair_is_order_independent():
    assert canonical_pair(BOB, ALICE) == canonical_pair(ALICE, BOB) == (ALICE, BOB)
    assert pair_key(BOB, ALICE) == f"{ALICE}:{BOB}"


def test_send_persists_unread_message(service, db):
    message = _send(service, ALICE, BOB, "hello")

    stored = db["messages"].find_one({"sender_id": ALICE})
    assert str(stored["_id"]) == message["_id"]
    assert stored["receiver_id"] == BOB
    assert stored["message"] == "hello"
    assert stored["read"] is False


def test_one_conversation_per_pair_in_both_directions(service, db):
    _send(service, ALICE, BOB, "hi bob")
    _send(service, BOB, ALICE, "hi alice")
    _send(service, ALICE, BOB, "how are you?")

    conversations = list(db["conversations"].find())
    assert len(conversations) == 1
    assert conversations[0]["participants"] == [ALICE, BOB]
    assert len(conversations[0]["messages"]) == 3


def test_concurrent_first_messages_share_one_conversation(service, db):
    async def both():
        return await asyncio.gather(
            service.send(ALICE, BOB, "first from alice"),
            service.send(BOB, ALICE, "first from bob"),
        )

    sent = asyncio.run(both())

    conversation = service.get_conversation(BOB, ALICE)
    assert db["conversations"].count_documents({}) == 1
    assert {str(m) for m in conversation["messages"]} == {m["_id"] for m in sent}


def test_lost_upsert_race_falls_back_to_update(service, db, monkeypatch):
    original = service.conversations.find_one_and_update
    calls = []

    def racing(filter, update, upsert=False, **kwargs):
        calls.append(upsert)
        if len(calls) == 1:
            # the other sender's upsert wins between our find and insert
            db["conversations"].insert_one({"pair_key": filter["pair_key"], "participants": [ALICE, BOB], "messages": []})
            raise DuplicateKeyError("E11000 duplicate key error")
        return original(filter, update, upsert=upsert, **kwargs)

    monkeypatch.setattr(service.conversations, "find_one_and_update", racing)

    message = _send(service, ALICE, BOB, "hello")

    assert calls == [True, False]
    conversations = list(db["conversations"].find())
    assert len(conversations) == 1
    assert [str(m) for m in conversations[0]["messages"]] == [message["_id"]]


@pytest.mark.parametrize("body", ["", "   ", None])
def test_blank_message_is_rejected(service, db, body):
    with pytest.raises(InvalidRequestError):
        _send(service, ALICE, BOB, body)
    assert db["messages"].count_documents({}) == 0


def test_send_pushes_to_online_receiver(service, hub):
    async def scenario():
        socket = FakeSocket()
        conn = await hub.connect(socket)
        await hub.register(conn, BOB)
        message = await service.send(ALICE, BOB, "ping")
        return socket, message

    socket, message = asyncio.run(scenario())

    frames = socket.events("message:new")
    assert len(frames) == 1
    assert frames[0]["data"]["_id"] == message["_id"]
    assert frames[0]["data"]["message"] == "ping"


def test_send_to_offline_receiver_still_persists(service, db):
    _send(service, ALICE, BOB, "are you there?")

    assert db["messages"].count_documents({"receiver_id": BOB, "read": False}) == 1


def test_thread_is_symmetric_and_chronological(service):
    _send(service, ALICE, BOB, "1")
    _send(service, BOB, ALICE, "2")
    _send(service, ALICE, CAROL, "not in this thread")
    _send(service, ALICE, BOB, "3")

    from_alice = service.get_thread(ALICE, BOB)
    from_bob = service.get_thread(BOB, ALICE)

    assert [m["message"] for m in from_alice] == ["1", "2", "3"]
    assert [m["_id"] for m in from_alice] == [m["_id"] for m in from_bob]


def test_opening_thread_marks_only_incoming_messages_read(service, db):
    _send(service, ALICE, BOB, "to bob")
    _send(service, BOB, ALICE, "to alice")

    service.get_thread(BOB, ALICE)

    assert db["messages"].find_one({"message": "to bob"})["read"] is True
    assert db["messages"].find_one({"message": "to alice"})["read"] is False


def test_offline_hello_is_read_after_receiver_opens_thread(service, db):
    _send(service, ALICE, BOB, "hello")
    assert db["messages"].find_one({"message": "hello"})["read"] is False

    thread = service.get_thread(BOB, ALICE)

    assert [m["message"] for m in thread] == ["hello"]
    assert db["messages"].find_one({"message": "hello"})["read"] is True


def test_acknowledge_read_notifies_sender(service, hub, db):
    async def scenario():
        socket = FakeSocket()
        conn = await hub.connect(socket)
        await hub.register(conn, ALICE)
        await service.send(ALICE, BOB, "one")
        await service.send(ALICE, BOB, "two")
        updated = await service.acknowledge_read(sender_id=ALICE, receiver_id=BOB)
        return socket, updated

    socket, updated = asyncio.run(scenario())

    assert updated == 2
    assert socket.events("messagesRead") == [{"event": "messagesRead", "data": {"readerId": BOB}}]
    assert db["messages"].count_documents({"read": False}) == 0


def test_latest_per_counterparty(service):
    _send(service, ALICE, BOB, "old to bob")
    _send(service, CAROL, ALICE, "from carol")
    _send(service, BOB, ALICE, "latest from bob")

    latest = service.get_latest_per_counterparty(ALICE)

    assert set(latest) == {BOB, CAROL}
    assert latest[BOB]["message"] == "latest from bob"
    assert latest[CAROL]["message"] == "from carol"


def test_count_unread_groups_by_sender(service):
    _send(service, BOB, ALICE, "a")
    _send(service, BOB, ALICE, "b")
    _send(service, CAROL, ALICE, "c")
    _send(service, ALICE, BOB, "outgoing")

    assert service.count_unread(ALICE) == {BOB: 2, CAROL: 1}
