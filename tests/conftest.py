import pytest

from services.activity import ActivityEngine
from services.controller import PetController
from services.feedback import RecordingFeedback
from services.learning import LearningTrack
from services.persistence import RECORD_NAMES, JsonRepository
from services.scheduler import ManualClock, Scheduler
from services.stat_store import StatStore


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def store(clock):
    s = StatStore()
    s.reset(clock.now)
    return s


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def engine(store, scheduler, feedback):
    return ActivityEngine(store, scheduler, feedback)


@pytest.fixture
def learning(store, scheduler, feedback):
    return LearningTrack(store, scheduler, feedback)


@pytest.fixture
def repos(tmp_path):
    return {name: JsonRepository(name, str(tmp_path)) for name in RECORD_NAMES}


@pytest.fixture
def controller(scheduler, feedback, repos):
    c = PetController(scheduler, feedback, repos)
    c.load_or_seed()
    yield c
    c.teardown()
