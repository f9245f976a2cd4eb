import uuid

from levelup.client.session_store import FileStorage, MemoryStorage, SessionStore
from levelup.models import UserRole
from levelup.schemas import Identity


def _identity(**overrides):
    fields = dict(
        id=uuid.uuid4(),
        username="minji",
        name="Kim Minji",
        role=UserRole.STUDENT,
        grade="5",
        group="3",
        church="Hope Church",
        current_talent=120,
        max_talent=150,
    )
    fields.update(overrides)
    return Identity(**fields)


def test_save_then_load(tmp_path):
    store = SessionStore(FileStorage(tmp_path), key="levelup2025_user")
    identity = _identity()

    store.save(identity)

    assert store.load() == identity
    assert (tmp_path / "levelup2025_user.json").exists()


def test_load_without_record_is_none():
    assert SessionStore(MemoryStorage(), key="k").load() is None


def test_clear_removes_session():
    store = SessionStore(MemoryStorage(), key="k")
    store.save(_identity())

    store.clear()

    assert store.load() is None


def test_corrupt_record_is_cleared(tmp_path):
    storage = FileStorage(tmp_path)
    store = SessionStore(storage, key="levelup2025_user")
    storage.set("levelup2025_user", "{not json")

    assert store.load() is None
    assert storage.get("levelup2025_user") is None
    assert store.load() is None


def test_record_with_wrong_shape_is_cleared():
    storage = MemoryStorage()
    store = SessionStore(storage, key="k")
    storage.set("k", '{"username": "minji", "role": "wizard"}')

    assert store.load() is None
    assert storage.get("k") is None


def test_undecodable_bytes_are_cleared(tmp_path):
    (tmp_path / "k.json").write_bytes(b"\xff\xfe\x00garbage")
    store = SessionStore(FileStorage(tmp_path), key="k")

    assert store.load() is None
    assert not (tmp_path / "k.json").exists()


def test_default_key_comes_from_settings():
    store = SessionStore(MemoryStorage())

    assert store.key == "levelup2025_user"
