from pathlib import Path

from src.contractor_kit.models.domain import RouteSettings
from src.contractor_kit.persistence.filesystem import FileStorage
from src.contractor_kit.persistence.settings_store import RouteSettingsStore


def test_file_storage_creates_preferences_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    assert storage.preferences_root.is_dir()
    assert storage.preference_path("route_settings") == tmp_path / "preferences" / "route_settings.json"


def test_file_storage_writes_and_reads_json(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    path = storage.preference_path("sample")

    storage.write_json(path, {"hello": "world"})

    assert path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert storage.read_json(path) == {"hello": "world"}
    assert not path.with_suffix(".json.tmp").exists()
    assert storage.read_json(storage.preference_path("missing")) is None


def test_route_settings_default_to_empty(tmp_path: Path) -> None:
    store = RouteSettingsStore(FileStorage(root=tmp_path))

    assert store.load() == RouteSettings()


def test_route_settings_save_trims_and_persists(tmp_path: Path) -> None:
    store = RouteSettingsStore(FileStorage(root=tmp_path))

    saved = store.save(RouteSettings(start_address="  12 Depot Rd ", end_address="   "))

    assert saved == RouteSettings(start_address="12 Depot Rd", end_address=None)
    assert RouteSettingsStore(FileStorage(root=tmp_path)).load() == saved


def test_corrupt_route_settings_fall_back_to_empty(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    store = RouteSettingsStore(storage)
    store.path.write_text("{not json", encoding="utf-8")

    assert store.load() == RouteSettings()

    store.path.write_text('["a", "b"]', encoding="utf-8")
    assert store.load() == RouteSettings()


def test_route_settings_with_invalid_utf8_fall_back_to_empty(tmp_path: Path) -> None:
    store = RouteSettingsStore(FileStorage(root=tmp_path))
    store.path.write_bytes(b'{"start_address": "\xff\xfe"}')

    assert store.load() == RouteSettings()
