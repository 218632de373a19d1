import json

import pytest

from syt.integrity import hash_script, load, store, verify

SCRIPT = "#!/bin/sh\nexec syt rewrite \"$1\"\n"


def test_hash_of_empty_string():
    assert (
        hash_script("")
        == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_hash_is_hex_and_distinguishes_content():
    digest = hash_script(SCRIPT)
    assert len(digest) == 64
    assert set(digest) <= set("0123456789abcdef")
    assert hash_script(SCRIPT + " ") != digest
    assert hash_script(SCRIPT) == digest


def test_store_then_load(tmp_path):
    data_dir = tmp_path / "nested" / "data"
    store(data_dir, SCRIPT)
    assert load(data_dir) == hash_script(SCRIPT)
    doc = json.loads((data_dir / "hook-integrity.json").read_text())
    assert doc == {"sha256": hash_script(SCRIPT)}


def test_verify(tmp_path):
    store(tmp_path, SCRIPT)
    assert verify(tmp_path, SCRIPT) is True
    assert verify(tmp_path, SCRIPT + "# tampered\n") is False


def test_verify_without_file(tmp_path):
    assert verify(tmp_path, SCRIPT) is False


def test_load_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load(tmp_path)


def test_load_corrupt_raises(tmp_path):
    (tmp_path / "hook-integrity.json").write_text("{not json")
    with pytest.raises(ValueError):
        load(tmp_path)
    assert verify(tmp_path, SCRIPT) is False


def test_load_wrong_shape_raises(tmp_path):
    (tmp_path / "hook-integrity.json").write_text("[1, 2]")
    with pytest.raises(ValueError):
        load(tmp_path)


def test_load_missing_key_gives_empty(tmp_path):
    (tmp_path / "hook-integrity.json").write_text("{}")
    assert load(tmp_path) == ""