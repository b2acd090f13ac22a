from types import SimpleNamespace

import pytest

from core.errors import NotFoundError
from models.models_tracker import CompareMode
from models.models_user import User
from services.trackers import TrackerRepository


def _draft(**overrides):
    fields = dict(
        name="Stock",
        cron_expr="0 * * * *",
        compare_mode=CompareMode.INNER_HTML,
        website_url="https://example.com/stock",
        selector=".availability",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def owners(session):
    a = User(full_name="A", email="a@example.com", password_hash="x")
    b = User(full_name="B", email="b@example.com", password_hash="x")
    session.add_all([a, b])
    session.commit()
    return a.id, b.id


def test_create_assigns_id_and_timestamps(session, owners):
    repo = TrackerRepository(session)
    t = repo.create(owners[0], _draft())
    assert t.id is not None
    assert t.user_id == owners[0]
    assert t.created_at == t.updated_at
    assert t.compare_mode is CompareMode.INNER_HTML


def test_get_by_id_is_scoped_to_owner(session, owners):
    repo = TrackerRepository(session)
    t = repo.create(owners[0], _draft())
    assert repo.get_by_id(owners[0], t.id).id == t.id
    with pytest.raises(NotFoundError):
        repo.get_by_id(owners[1], t.id)


def test_update_and_delete_are_scoped_to_owner(session, owners):
    repo = TrackerRepository(session)
    t = repo.create(owners[0], _draft())
    with pytest.raises(NotFoundError):
        repo.update(owners[1], t.id, _draft(name="stolen"))
    with pytest.raises(NotFoundError):
        repo.delete(owners[1], t.id)
    assert repo.get_by_id(owners[0], t.id).name == "Stock"


def test_update_refreshes_updated_at(session, owners):
    repo = TrackerRepository(session)
    t = repo.create(owners[0], _draft())
    before = t.updated_at
    updated = repo.update(owners[0], t.id, _draft(name="Renamed", compare_mode=CompareMode.INNER_TEXT))
    assert updated.name == "Renamed"
    assert updated.compare_mode is CompareMode.INNER_TEXT
    assert updated.updated_at > before


def test_list_by_owner(session, owners):
    repo = TrackerRepository(session)
    first = repo.create(owners[0], _draft(name="first"))
    repo.create(owners[1], _draft(name="other"))
    second = repo.create(owners[0], _draft(name="second"))
    assert [t.id for t in repo.list_by_owner(owners[0])] == [first.id, second.id]


def test_delete_removes_row(session, owners):
    repo = TrackerRepository(session)
    t = repo.create(owners[0], _draft())
    repo.delete(owners[0], t.id)
    with pytest.raises(NotFoundError):
        repo.get_by_id(owners[0], t.id)
    with pytest.raises(NotFoundError):
        repo.delete(owners[0], t.id)
