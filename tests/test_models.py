import pytest

from models.activity import ActivityRecord, LearningRecord
from models.pet import PetDetails, PetRecord, PetStats
from services.tuning import Tuning, clamp


def test_clamp():
    assert clamp(120) == 100.0
    assert clamp(-5) == 0.0
    assert clamp(42.5) == 42.5


def test_tuning_is_not_instantiable():
    with pytest.raises(TypeError):
        Tuning()


def test_stats_clamp_on_merge_and_load_only():
    raw = PetStats(health=150, spirituality=-1)
    assert raw.health == 150
    assert raw.get("hunger") == 0.0

    merged = PetStats().merged({"health": 150, "spirituality": -1, "hunger": 5})
    assert merged.health == 100
    assert merged.spirituality == 0
    assert merged.energy == Tuning.INITIAL_STAT

    loaded = PetStats.from_dict({"health": 150, "spirituality": -1})
    assert loaded.health == 100
    assert loaded.spirituality == 0
    assert loaded.happiness == Tuning.INITIAL_STAT


def test_details_require_all_fields():
    with pytest.raises(ValueError):
        PetDetails.from_dict({"name": "x", "emoji": "y", "age": 1})


def test_record_deduplicates_achievements():
    raw = PetRecord().to_dict()
    raw["achievements"] = ["Quran Mastery", "Fiqh Mastery", "Quran Mastery"]
    assert PetRecord.from_dict(raw).achievements == ["Quran Mastery", "Fiqh Mastery"]


def test_activity_record_defaults_and_lookups():
    record = ActivityRecord()
    assert set(record.prayer_status) == set(Tuning.PRAYER_SLOTS)
    assert record.count("Subhanallah") == 0
    assert record.prayed("Witr") is False


def test_activity_record_rejects_negative_counts():
    with pytest.raises(ValueError):
        ActivityRecord(dhikr_counts={"Subhanallah": -1})


def test_activity_record_drops_unknown_prayer_slots():
    record = ActivityRecord(prayer_status={"Fajr": True, "Witr": True})
    assert record.prayer_status["Fajr"] is True
    assert "Witr" not in record.prayer_status


def test_learning_record_ignores_unknown_subjects():
    record = LearningRecord.from_dict({"progress": {"Quran": 40, "Astronomy": 10}})
    assert record.progress["Quran"] == 40
    assert "Astronomy" not in record.progress


def test_learning_record_rejects_out_of_range_progress():
    with pytest.raises(ValueError):
        LearningRecord.from_dict({"progress": {"Quran": 140}})
