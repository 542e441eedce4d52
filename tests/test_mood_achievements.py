import pytest

from models.pet import PetStats
from services.achievements import (
    age_achievements,
    evaluate_achievements,
    has_max_stats,
    is_alive,
    stat_achievements,
)
from services.mood import MOOD_HIERARCHY, derive_mood, mood_improvement


@pytest.mark.parametrize(
    "stats, mood",
    [
        (PetStats(health=10, spirituality=90, energy=90, happiness=90), "sad"),
        (PetStats(health=90, spirituality=29, energy=90, happiness=90), "sad"),
        (PetStats(health=80, spirituality=80, energy=80, happiness=80), "happy"),
        (PetStats(health=50, spirituality=50, energy=50, happiness=50), "content"),
        (PetStats(health=50, spirituality=50, energy=20, happiness=20), "tired"),
        (PetStats(health=50, spirituality=50, energy=50, happiness=20), "hungry"),
        (PetStats(health=80, spirituality=80, energy=40, happiness=70), "content"),
        (PetStats(health=80, spirituality=80, energy=30, happiness=80), "happy"),
    ],
)
def test_derive_mood(stats, mood):
    assert derive_mood(stats) == mood


def test_hierarchy_is_not_the_evaluation_order():
    assert MOOD_HIERARCHY == ("sad", "hungry", "tired", "content", "happy")
    assert mood_improvement("sad", "content") == 3
    assert mood_improvement("tired", "hungry") == 0
    assert mood_improvement("hungry", "tired") == 1
    assert mood_improvement("happy", "happy") == 0
    assert mood_improvement("unknown", "happy") == 0


def test_stat_achievements_award_highest_tier_only():
    stats = PetStats(health=100, spirituality=80, energy=50, happiness=49)
    assert stat_achievements(stats) == ["Spiritual Guide", "Peak Health", "Active"]


def test_age_achievements():
    assert age_achievements(5) == []
    assert age_achievements(6) == ["Growing Soul"]
    assert age_achievements(12) == ["Mature Soul"]
    assert age_achievements(30) == ["Wise Elder"]


def test_evaluate_keeps_mastery_after_stats_fall():
    low = PetStats(health=40, spirituality=40, energy=40, happiness=40)
    assert evaluate_achievements(low, 0, ["Quran Mastery"]) == ["Quran Mastery"]

    high = PetStats(health=75, spirituality=40, energy=40, happiness=40)
    labels = evaluate_achievements(high, 13, ["Quran Mastery", "Quran Mastery"])
    assert labels == ["Vibrant Health", "Mature Soul", "Quran Mastery"]


def test_max_stats_and_liveness():
    assert has_max_stats(PetStats(100, 100, 100, 100))
    assert not has_max_stats(PetStats(100, 100, 99.5, 100))
    assert is_alive(PetStats(health=0.5, spirituality=0.5, energy=0, happiness=0))
    assert not is_alive(PetStats(health=0, spirituality=30))
