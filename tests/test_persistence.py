import os

from services.persistence import JsonRepository, data_dir


def test_data_dir_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SOULPET_DATA_DIR", str(tmp_path))
    assert data_dir() == str(tmp_path)
    repo = JsonRepository("pet")
    assert repo.path() == os.path.join(str(tmp_path), "pet.json")


def test_save_leaves_only_the_final_file(tmp_path):
    repo = JsonRepository("activity", str(tmp_path))
    assert repo.save({"last_action_message": "Recited: Subhanallah (1x)"})
    assert repo.save({"last_action_message": "Studied: Quran"})
    assert os.listdir(tmp_path) == ["activity.json"]
    assert repo.load() == {"last_action_message": "Studied: Quran"}


def test_unserializable_payload_is_reported(tmp_path):
    repo = JsonRepository("pet", str(tmp_path))
    assert repo.save({"bad": object()}) is False
    assert os.listdir(tmp_path) == []


def test_load_missing_or_foreign_content(tmp_path):
    repo = JsonRepository("learning", str(tmp_path))
    assert repo.load() is None
    (tmp_path / "learning.json").write_text("[1, 2]", encoding="utf-8")
    assert repo.load() is None
    repo.clear()
    assert not (tmp_path / "learning.json").exists()
