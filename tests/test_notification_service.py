import asyncio

import pytest

from careerhub.core.errors import InvalidRequestError, NotFoundError
from careerhub.models import RecruiterSender, StudentSender, UserKind, sender_from
from careerhub.schemas.schemas import NotificationKind
from careerhub.services.notification_service import NotificationService

from tests.conftest import FakeSocket

GHOST = "65b0000000000000000000ff"


@pytest.fixture
def service(db, hub, profiles):
    return NotificationService(hub, profiles, db)


def _create(service, recipient, sender, title="Hello", kind=NotificationKind.system):
    return asyncio.run(service.create(recipient, sender, kind, title, f"{title} body"))


def test_sender_from_builds_tagged_variant():
    assert sender_from("student", "abc") == StudentSender("abc")
    assert sender_from(UserKind.recruiter, "abc") == RecruiterSender("abc")
    assert RecruiterSender("abc").kind is UserKind.recruiter


def test_create_persists_unread_notification(service, db, make_student, make_recruiter):
    student = make_student()
    recruiter = make_recruiter()

    created = _create(service, student, RecruiterSender(recruiter), kind=NotificationKind.application)

    stored = db["notifications"].find_one()
    assert str(stored["_id"]) == created["_id"]
    assert stored["recipient_id"] == student
    assert stored["sender_kind"] == "recruiter"
    assert stored["kind"] == "application"
    assert stored["read"] is False
    assert created["sender"]["name"] == "Acme Labs"


def test_create_pushes_to_online_recipient(service, hub, make_student):
    student = make_student()
    other = make_student("Ravi Kumar")

    async def scenario():
        socket = FakeSocket()
        conn = await hub.connect(socket)
        await hub.register(conn, student)
        await service.create(student, StudentSender(other), NotificationKind.follow, "New Follower", "Ravi Kumar started following you")
        return socket

    socket = asyncio.run(scenario())

    frames = socket.events("notification:new")
    assert len(frames) == 1
    assert frames[0]["data"]["title"] == "New Follower"
    assert frames[0]["data"]["sender"]["name"] == "Ravi Kumar"


def test_unknown_kind_is_rejected(service, make_student):
    student = make_student()
    with pytest.raises(InvalidRequestError):
        asyncio.run(service.create(student, StudentSender(student), "spam", "t", "b"))


def test_list_is_newest_first_with_senders(service, make_student, make_recruiter):
    student = make_student()
    recruiter = make_recruiter()
    _create(service, student, RecruiterSender(recruiter), "first")
    _create(service, student, RecruiterSender(recruiter), "second")

    listing = service.list_for_user(student)

    assert [n["title"] for n in listing] == ["second", "first"]
    assert all(n["sender"]["kind"] == "recruiter" for n in listing)


def test_dangling_sender_does_not_break_listing(service, db, make_student, make_recruiter):
    student = make_student()
    recruiter = make_recruiter()
    _create(service, student, RecruiterSender(recruiter), "from acme")
    _create(service, student, StudentSender(GHOST), "from a deleted account")
    _create(service, student, StudentSender("not-an-object-id"), "from garbage")

    listing = service.list_for_user(student)

    assert len(listing) == 3
    by_title = {n["title"]: n for n in listing}
    assert by_title["from a deleted account"]["sender"] is None
    assert by_title["from garbage"]["sender"] is None
    assert by_title["from acme"]["sender"]["name"] == "Acme Labs"


def test_resolver_exception_only_affects_its_row(service, make_student, make_recruiter):
    student = make_student()
    recruiter = make_recruiter()
    _create(service, student, RecruiterSender(recruiter), "recruiter row")
    _create(service, student, StudentSender(student), "student row")

    def explode(user_id):
        raise RuntimeError("lookup failed")

    service._resolvers[UserKind.student] = explode

    listing = service.list_for_user(student)

    by_title = {n["title"]: n for n in listing}
    assert by_title["student row"]["sender"] is None
    assert by_title["recruiter row"]["sender"] is not None


def test_mark_read_is_idempotent(service, db, make_student):
    student = make_student()
    created = _create(service, student, StudentSender(student))

    first = service.mark_read(created["_id"])
    second = service.mark_read(created["_id"])

    assert first["read"] is True and second["read"] is True
    assert db["notifications"].count_documents({"read": True}) == 1


def test_mark_read_unknown_id_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.mark_read(GHOST)


def test_mark_read_malformed_id_is_invalid(service):
    with pytest.raises(InvalidRequestError):
        service.mark_read("nope")


def test_mark_read_scoped_to_recipient(service, make_student):
    owner = make_student()
    intruder = make_student("Ravi Kumar")
    created = _create(service, owner, StudentSender(intruder))

    with pytest.raises(NotFoundError):
        service.mark_read(created["_id"], user_id=intruder)


def test_clear_all_only_touches_recipient(service, make_student):
    mine = make_student()
    theirs = make_student("Ravi Kumar")
    _create(service, mine, StudentSender(theirs), "a")
    _create(service, mine, StudentSender(theirs), "b")
    _create(service, theirs, StudentSender(mine), "c")

    assert service.clear_all(mine) == 2

    assert service.list_for_user(mine) == []
    assert [n["title"] for n in service.list_for_user(theirs)] == ["c"]
