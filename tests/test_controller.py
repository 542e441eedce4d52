import json
import os

from services.controller import PetController
from services.feedback import RecordingFeedback
from services.persistence import RECORD_NAMES, JsonRepository
from services.scheduler import ManualClock, Scheduler
from services.tuning import Tuning


def test_first_run_seeds_and_saves(controller, tmp_path):
    for name in RECORD_NAMES:
        assert (tmp_path / f"{name}.json").exists()
    snap = controller.snapshot()
    assert snap.alive
    assert snap.name == Tuning.DEFAULT_NAME
    assert snap.stats == {n: 20.0 for n in Tuning.STAT_NAMES}
    assert snap.mood == "sad"
    assert snap.seconds_until_decay == 10
    assert snap.achievements == ()
    assert not snap.has_max_stats
    assert [d.category for d in snap.dhikr] == list(Tuning.DHIKR_STAT)


def test_state_survives_restart(controller, scheduler, repos, clock):
    controller.activity.perform_dhikr("Subhanallah")
    controller.activity.complete_prayer("Fajr")
    scheduler.advance(Tuning.TAP_DEBOUNCE_S)
    controller.learning.study("Quran")
    controller.teardown()

    again = PetController(Scheduler(clock), RecordingFeedback(), repos)
    assert again.load_or_seed() is True
    snap = again.snapshot()
    assert snap.dhikr[0].count == 1
    assert snap.prayers["Fajr"] is True
    assert snap.learning["Quran"] == 5
    assert snap.stats == controller.store.stats.to_dict()
    assert snap.last_action_message == "Studied: Quran"
    again.teardown()


def test_every_change_is_written(controller, tmp_path):
    controller.activity.perform_dhikr("Alhamdulillah")
    with open(tmp_path / "activity.json", encoding="utf-8") as f:
        assert json.load(f)["dhikr_counts"] == {"Alhamdulillah": 1}
    with open(tmp_path / "pet.json", encoding="utf-8") as f:
        assert json.load(f)["stats"]["happiness"] == 21.0


def test_corrupt_pet_record_starts_new_pet(tmp_path, repos):
    (tmp_path / "pet.json").write_text("{not json", encoding="utf-8")
    c = PetController(Scheduler(ManualClock()), RecordingFeedback(), repos)
    assert c.load_or_seed() is False
    assert c.snapshot().alive


def test_invalid_pet_record_starts_new_pet(tmp_path, repos):
    (tmp_path / "pet.json").write_text(json.dumps({"stats": {}}), encoding="utf-8")
    c = PetController(Scheduler(ManualClock()), RecordingFeedback(), repos)
    assert c.load_or_seed() is False


def test_mood_improvement_celebrates(controller, feedback):
    controller.store.update_stats(health=50, spirituality=50, energy=50, happiness=50)
    controller.store.update_stats(health=80, spirituality=80, happiness=80)
    controller.store.update_stats(health=10)
    celebrations = [info for name, info in feedback.events if name == "celebrate"]
    assert [c["level"] for c in celebrations] == [3, 1]
    assert celebrations[0]["previous"] == "sad"


def test_death_stops_timers_and_reset_revives(controller, scheduler, feedback):
    scheduler.advance(200)
    snap = controller.snapshot()
    assert not snap.alive
    assert "death" in feedback.names()
    assert not controller.decay.running
    assert not controller.activity.perform_dhikr("Subhanallah")

    controller.reset_pet("Amal", "🐰")
    snap = controller.snapshot()
    assert snap.alive
    assert snap.name == "Amal"
    assert snap.stats == {n: 20.0 for n in Tuning.STAT_NAMES}
    assert controller.decay.running


def test_reset_pet_clears_block_and_counts(controller):
    controller.activity.record.dhikr_counts["Subhanallah"] = 32
    controller.activity.perform_dhikr("Subhanallah")
    assert controller.snapshot().blocked_dhikr == "Subhanallah"

    controller.reset_pet()
    snap = controller.snapshot()
    assert snap.blocked_dhikr is None
    assert all(d.count == 0 for d in snap.dhikr)
    assert controller.activity.perform_dhikr("Subhanallah")


def test_reset_all_wipes_everything(controller, tmp_path):
    controller.learning.record.progress["Quran"] = 95
    controller.learning.study("Quran")
    controller.activity.complete_prayer("Dhuhr")
    assert "Quran Mastery" in controller.snapshot().achievements

    controller.reset_all()
    snap = controller.snapshot()
    assert snap.achievements == ()
    assert snap.learning["Quran"] == 0
    assert not any(snap.prayers.values())
    assert os.path.exists(tmp_path / "pet.json")


def test_user_action_postpones_scheduled_decay(controller, scheduler):
    scheduler.advance(9)
    controller.activity.rest()
    scheduler.advance(6)
    assert controller.store.stats.health == 25
    assert controller.snapshot().seconds_until_decay == 4


def test_repository_roundtrip_and_clear(tmp_path):
    repo = JsonRepository("pet", str(tmp_path))
    assert repo.load() is None
    assert repo.save({"a": 1, "emoji": "😌"})
    assert repo.load() == {"a": 1, "emoji": "😌"}
    repo.clear()
    assert repo.load() is None


def test_repository_rejects_non_object(tmp_path):
    (tmp_path / "activity.json").write_text("[1, 2]", encoding="utf-8")
    assert JsonRepository("activity", str(tmp_path)).load() is None


def test_repository_uses_env_data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SOULPET_DATA_DIR", str(tmp_path / "data"))
    repo = JsonRepository("learning")
    assert repo.path() == os.path.join(str(tmp_path / "data"), "learning.json")
    assert os.path.isdir(tmp_path / "data")


def test_study_sets_the_action_message(controller, repos):
    controller.activity.perform_dhikr("Subhanallah")
    assert controller.learning.study("Fiqh")
    assert controller.snapshot().last_action_message == "Studied: Fiqh"
    assert repos["activity"].load()["last_action_message"] == "Studied: Fiqh"


def test_teardown_cancels_every_timer(controller, scheduler):
    controller.activity.record.dhikr_counts["Subhanallah"] = 32
    assert controller.activity.perform_dhikr("Subhanallah")
    assert controller.activity.blocked_dhikr == "Subhanallah"
    assert scheduler.pending() == 3

    controller.teardown()
    assert scheduler.pending() == 0
    assert scheduler.advance(Tuning.DECAY_THRESHOLD_S * 10) == 0
