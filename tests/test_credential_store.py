import json
import os
import stat

import pytest

from dvault.credential_store import load_credentials, save_credentials
from dvault.models import Credential


def test_load_missing_file_returns_empty_credential(tmp_path):
    credential = load_credentials(str(tmp_path / "missing.json"))
    assert credential == Credential("", "")
    assert not credential.usable


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "credentials.json"
    save_credentials(str(path), Credential("key", "secret"))
    loaded = load_credentials(str(path))
    assert loaded == Credential("key", "secret")
    assert loaded.usable
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "pinata_api_key": "key",
        "pinata_secret_api_key": "secret",
    }


def test_save_overwrites_previous_value(tmp_path):
    path = str(tmp_path / "credentials.json")
    save_credentials(path, Credential("old-key", "old-secret"))
    save_credentials(path, Credential("new-key", ""))
    loaded = load_credentials(path)
    assert loaded == Credential("new-key", "")
    assert not loaded.usable


@pytest.mark.skipif(os.name != "posix", reason="file modes are POSIX only")
def test_saved_file_is_private(tmp_path):
    path = tmp_path / "credentials.json"
    save_credentials(str(path), Credential("key", "secret"))
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_non_object_file_is_rejected(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_credentials(str(path))


def test_save_strips_pasted_whitespace(tmp_path):
    path = tmp_path / "credentials.json"
    save_credentials(str(path), Credential(" key ", "secret\n"))
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "pinata_api_key": "key",
        "pinata_secret_api_key": "secret",
    }


def test_load_strips_hand_edited_whitespace(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text('{"pinata_api_key": "  key", "pinata_secret_api_key": "secret\\t"}', encoding="utf-8")
    assert load_credentials(str(path)) == Credential("key", "secret")
