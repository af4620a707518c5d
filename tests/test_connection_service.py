"""Tests for adding, finding, listing and deleting saved connections."""
import configparser
from pathlib import Path
import sys
from unittest.mock import MagicMock

import pytest

# Ensure application importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conman_app.connections import CONNECTIONS_FILE, ConnectionRecord, load_connections
from conman_app.errors import ConnectionNotFoundError
from conman_app.services.connection_service import ConnectionService


def _load_cfg() -> configparser.ConfigParser:
    cfg = configparser.ConfigParser()
    cfg.read(Path(__file__).with_name("connections_test_config.ini"))
    return cfg


def _service(tmp_path, launcher=None) -> ConnectionService:
    return ConnectionService(tmp_path / CONNECTIONS_FILE, launcher=launcher)


def test_add_then_list(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    c1 = cfg["connection1"]
    service.add_connection(c1["name"], c1["user"], c1["ip"], c1["key"])

    assert service.load_connections() == [ConnectionRecord("box", "u", "1.2.3.4", "/k")]
    assert service.list_connections() == ["box"]


def test_verbose_listing_shows_details(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    c2 = cfg["connection2"]
    service.add_connection(c2["name"], c2["user"], c2["ip"], c2["key"])

    assert service.list_connections(verbose=True) == [
        "web deploy@web.example.com /nonexistent/keys/id_ed25519"
    ]


def test_duplicate_names_are_allowed_and_first_is_found(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    name = cfg["duplicate"]["name"]
    service.add_connection(name, "first", "10.0.0.1", "/k1")
    service.add_connection(name, "second", "10.0.0.2", "/k2")

    assert len(service.load_connections()) == 2
    found = service.find_connection(name)
    assert found.user == "first"


def test_find_missing_returns_none(tmp_path):
    cfg = _load_cfg()
    assert _service(tmp_path).find_connection(cfg["missing"]["name"]) is None


def test_delete_removes_all_matches(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    name = cfg["duplicate"]["name"]
    service.add_connection(name, "first", "10.0.0.1", "/k1")
    service.add_connection("keep", "u", "10.0.0.3", "/k3")
    service.add_connection(name, "second", "10.0.0.2", "/k2")

    assert service.delete_connection(name) == 2
    remaining = load_connections(tmp_path / CONNECTIONS_FILE)
    assert [c.name for c in remaining] == ["keep"]


def test_delete_missing_on_empty_store(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    with pytest.raises(ConnectionNotFoundError):
        service.delete_connection(cfg["missing"]["name"])
    assert not (tmp_path / CONNECTIONS_FILE).exists()


def test_delete_missing_leaves_file_unchanged(tmp_path):
    cfg = _load_cfg()
    service = _service(tmp_path)
    c1 = cfg["connection1"]
    service.add_connection(c1["name"], c1["user"], c1["ip"], c1["key"])
    store = tmp_path / CONNECTIONS_FILE
    before = store.read_bytes()

    with pytest.raises(ConnectionNotFoundError):
        service.delete_connection(cfg["missing"]["name"])
    assert store.read_bytes() == before


def test_connect_hands_record_to_launcher(tmp_path):
    cfg = _load_cfg()
    launcher = MagicMock()
    service = _service(tmp_path, launcher)
    c1 = cfg["connection1"]
    service.add_connection(c1["name"], c1["user"], c1["ip"], c1["key"])

    service.connect(c1["name"])
    launcher.connect.assert_called_once_with(ConnectionRecord("box", "u", "1.2.3.4", "/k"))


def test_connect_missing_raises_not_found(tmp_path):
    cfg = _load_cfg()
    launcher = MagicMock()
    service = _service(tmp_path, launcher)
    with pytest.raises(ConnectionNotFoundError):
        service.connect(cfg["missing"]["name"])
    launcher.connect.assert_not_called()
