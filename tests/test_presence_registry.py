from careerhub.services.presence_registry import Connection, PresenceRegistry


def _connection(registry, name):
    conn = Connection(websocket=None, connection_id=name)
    registry.attach(conn)
    return conn


def test_bind_makes_user_reachable():
    registry = PresenceRegistry()
    conn = _connection(registry, "c1")

    assert registry.bind(conn, "u1") is None

    assert conn.user_id == "u1"
    assert registry.connection_for("u1") is conn
    assert registry.is_online("u1")
    assert registry.online_user_ids() == ["u1"]


def test_second_bind_replaces_routing_but_keeps_old_connection_attached():
    registry = PresenceRegistry()
    old = _connection(registry, "old")
    new = _connection(registry, "new")

    registry.bind(old, "u1")
    replaced = registry.bind(new, "u1")

    assert replaced is old
    assert registry.connection_for("u1") is new
    assert old in registry.connections()


def test_release_frees_user_owned_by_connection():
    registry = PresenceRegistry()
    conn = _connection(registry, "c1")
    registry.bind(conn, "u1")

    registry.detach(conn)

    assert registry.release(conn) == "u1"
    assert registry.connection_for("u1") is None
    assert not registry.is_online("u1")


def test_release_without_handshake_is_noop():
    registry = PresenceRegistry()
    conn = _connection(registry, "c1")

    assert registry.release(conn) is None


def test_release_of_replaced_connection_keeps_newer_mapping():
    registry = PresenceRegistry()
    old = _connection(registry, "old")
    new = _connection(registry, "new")
    registry.bind(old, "u1")
    registry.bind(new, "u1")

    registry.detach(old)

    assert registry.release(old) is None
    assert registry.connection_for("u1") is new


def test_clear_forgets_everything():
    registry = PresenceRegistry()
    conn = _connection(registry, "c1")
    registry.bind(conn, "u1")

    registry.clear()

    assert len(registry) == 0
    assert registry.online_user_ids() == []


def test_rebinding_same_connection_frees_previous_user():
    registry = PresenceRegistry()
    conn = _connection(registry, "c1")

    registry.bind(conn, "u1")
    registry.bind(conn, "u2")

    assert registry.connection_for("u1") is None
    assert registry.online_user_ids() == ["u2"]

    registry.detach(conn)
    assert registry.release(conn) == "u2"
    assert registry.online_user_ids() == []


def test_rebinding_does_not_evict_newer_owner_of_previous_user():
    registry = PresenceRegistry()
    old = _connection(registry, "old")
    new = _connection(registry, "new")

    registry.bind(old, "u1")
    registry.bind(new, "u1")
    registry.bind(old, "u2")

    assert registry.connection_for("u1") is new
    assert registry.connection_for("u2") is old
