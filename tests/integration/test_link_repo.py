import sqlite3

import pytest

from biolink.adapters.sqlite.repos import SQLiteLinkRepo, connect, write_transaction
from biolink.components.links import LinkService
from biolink.domain.entities import Link
from biolink.domain.errors import DuplicateKeyError, OrderMismatchError, StorageError


@pytest.fixture
def repo(db_path):
    return SQLiteLinkRepo(db_path)


@pytest.fixture
def alice(make_profile):
    return make_profile("alice")


@pytest.fixture
def bob(make_profile):
    return make_profile("bob")


def _add(repo: SQLiteLinkRepo, profile_id: int, title: str, visible: bool = True) -> Link:
    return repo.create(
        Link(profile_id=profile_id, title=title, url=f"https://{title}.example", is_visible=visible)
    )


def _positions(repo: SQLiteLinkRepo, profile_id: int) -> list[int]:
    return [link.position for link in repo.list_for_profile(profile_id)]


def test_create_assigns_ids_and_appends(repo, alice):
    first = _add(repo, alice, "one")
    second = _add(repo, alice, "two", visible=False)
    third = _add(repo, alice, "three")

    assert first.id is not None and second.id is not None
    assert [first.position, second.position, third.position] == [0, 1, 2]
    listed = repo.list_for_profile(alice)
    assert [link.title for link in listed] == ["one", "two", "three"]
    assert listed[1].is_visible is False


def test_list_empty_profile(repo, alice):
    assert repo.list_for_profile(alice) == []
    assert repo.count_for_profile(alice) == 0


def test_get_is_scoped_to_profile(repo, alice, bob):
    link = _add(repo, alice, "mine")

    assert repo.get(alice, link.id) == link
    assert repo.get(bob, link.id) is None
    assert repo.get(alice, 9999) is None


def test_update_does_not_touch_position(repo, alice):
    _add(repo, alice, "one")
    link = _add(repo, alice, "two")

    updated = repo.update(alice, link.id, {"is_visible": False, "title": "Two", "position": 0})

    assert updated is not None
    assert updated.is_visible is False
    assert updated.title == "Two"
    assert updated.position == 1


def test_update_writes_only_given_columns(repo, alice):
    link = _add(repo, alice, "one")
    repo.update(alice, link.id, {"is_visible": False})

    updated = repo.update(alice, link.id, {"title": "renamed"})

    assert updated.title == "renamed"
    assert updated.is_visible is False
    assert updated.url == "https://one.example"


def test_update_with_no_changes_returns_current_row(repo, alice):
    link = _add(repo, alice, "one")

    assert repo.update(alice, link.id, {}) == link


def test_update_foreign_link_is_rejected(repo, alice, bob):
    link = _add(repo, alice, "mine")

    result = repo.update(bob, link.id, {"title": "stolen"})

    assert result is None
    assert repo.get(alice, link.id).title == "mine"


def test_interleaved_service_updates_keep_both_changes(db_path, alice):
    class InterleavingRepo(SQLiteLinkRepo):
        """Lets another writer commit between the service's read and its write."""

        interleaved = False

        def get(self, profile_id, link_id):
            link = super().get(profile_id, link_id)
            if not self.interleaved:
                self.interleaved = True
                other = LinkService(SQLiteLinkRepo(db_path))
                other.update(profile_id, link_id, {"is_visible": False})
            return link

    repo = InterleavingRepo(db_path)
    link = _add(repo, alice, "one")

    saved, errors = LinkService(repo).update(alice, link.id, {"title": "renamed"})

    assert errors == []
    assert saved.title == "renamed"
    assert saved.is_visible is False
    stored = SQLiteLinkRepo(db_path).get(alice, link.id)
    assert (stored.title, stored.is_visible) == ("renamed", False)


@pytest.mark.parametrize("link_id", [0, -1, 2**63, 10**20])
def test_out_of_range_ids_are_not_found(repo, alice, link_id):
    _add(repo, alice, "one")

    assert repo.get(alice, link_id) is None
    assert repo.update(alice, link_id, {"title": "x"}) is None
    assert repo.delete(alice, link_id) is False
    assert repo.count_for_profile(alice) == 1


def test_delete_middle_compacts_and_keeps_order(repo, alice):
    a = _add(repo, alice, "a")
    b = _add(repo, alice, "b")
    c = _add(repo, alice, "c")

    assert repo.delete(alice, b.id) is True

    remaining = repo.list_for_profile(alice)
    assert [link.id for link in remaining] == [a.id, c.id]
    assert [link.position for link in remaining] == [0, 1]


def test_delete_missing_or_foreign(repo, alice, bob):
    link = _add(repo, alice, "mine")

    assert repo.delete(bob, link.id) is False
    assert repo.delete(alice, 12345) is False
    assert repo.count_for_profile(alice) == 1


def test_create_after_delete_does_not_duplicate(repo, alice):
    _add(repo, alice, "a")
    b = _add(repo, alice, "b")
    _add(repo, alice, "c")
    repo.delete(alice, b.id)

    d = _add(repo, alice, "d")

    assert d.position == 2
    assert _positions(repo, alice) == [0, 1, 2]


def test_reorder_permutation(repo, alice):
    l1 = _add(repo, alice, "one")
    l2 = _add(repo, alice, "two")
    l3 = _add(repo, alice, "three")

    result = repo.reorder(alice, [l3.id, l1.id, l2.id])

    assert [(link.id, link.position) for link in result] == [(l3.id, 0), (l1.id, 1), (l2.id, 2)]
    assert [link.id for link in repo.list_for_profile(alice)] == [l3.id, l1.id, l2.id]


def test_reorder_twice_same_result(repo, alice):
    ids = [_add(repo, alice, name).id for name in ("a", "b", "c", "d")]
    order = [ids[2], ids[0], ids[3], ids[1]]

    first = repo.reorder(alice, order)
    second = repo.reorder(alice, order)

    assert first == second


@pytest.mark.parametrize("bad", ["missing", "extra", "duplicate"])
def test_reorder_mismatch_writes_nothing(repo, alice, bob, bad):
    a = _add(repo, alice, "a")
    b = _add(repo, alice, "b")
    foreign = _add(repo, bob, "theirs")
    ids = {
        "missing": [b.id],
        "extra": [b.id, a.id, foreign.id],
        "duplicate": [b.id, a.id, a.id],
    }[bad]

    with pytest.raises(OrderMismatchError):
        repo.reorder(alice, ids)

    assert [link.id for link in repo.list_for_profile(alice)] == [a.id, b.id]
    assert repo.get(bob, foreign.id).position == 0


def test_reorder_does_not_affect_other_profiles(repo, alice, bob):
    a1 = _add(repo, alice, "a1")
    a2 = _add(repo, alice, "a2")
    b1 = _add(repo, bob, "b1")
    b2 = _add(repo, bob, "b2")

    repo.reorder(alice, [a2.id, a1.id])

    assert [link.id for link in repo.list_for_profile(bob)] == [b1.id, b2.id]


def test_failed_transaction_rolls_back_every_assignment(repo, alice, db_path):
    a = _add(repo, alice, "a")
    b = _add(repo, alice, "b")

    conn = connect(db_path)
    try:
        with pytest.raises(sqlite3.IntegrityError):
            with write_transaction(conn):
                conn.execute("UPDATE links SET position = 5 WHERE id = ?", (a.id,))
                # Collides with a.position -> whole batch is rolled back
                conn.execute("UPDATE links SET position = 5 WHERE id = ?", (b.id,))
    finally:
        conn.close()

    assert [(link.id, link.position) for link in repo.list_for_profile(alice)] == [
        (a.id, 0),
        (b.id, 1),
    ]


def test_duplicate_position_is_rejected_by_storage(db_path, alice):
    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT INTO links (profile_id, title, url, position) VALUES (?, 'a', 'https://a', 0)",
        (alice,),
    )
    conn.commit()
    conn.close()

    conn = connect(db_path)
    try:
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO links (profile_id, title, url, position) "
                "VALUES (?, 'b', 'https://b', 0)",
                (alice,),
            )
    finally:
        conn.close()


def test_create_for_unknown_profile_is_storage_error(repo):
    with pytest.raises(StorageError) as exc_info:
        repo.create(Link(profile_id=424242, title="x", url="https://x"))

    assert not isinstance(exc_info.value, DuplicateKeyError)


def test_reorder_failing_midway_keeps_original_order(repo, alice, db_path):
    a = _add(repo, alice, "a")
    b = _add(repo, alice, "b")
    c = _add(repo, alice, "c")
    conn = sqlite3.connect(db_path)
    # Abort the second assignment of the batch (the row moving to position 1)
    conn.execute(
        """
        CREATE TRIGGER fail_second_assignment BEFORE UPDATE OF position ON links
        WHEN NEW.position = 1
        BEGIN
            SELECT RAISE(ABORT, 'assignment rejected');
        END
        """
    )
    conn.commit()
    conn.close()

    with pytest.raises(StorageError):
        repo.reorder(alice, [c.id, a.id, b.id])

    assert [(link.id, link.position) for link in repo.list_for_profile(alice)] == [
        (a.id, 0),
        (b.id, 1),
        (c.id, 2),
    ]
