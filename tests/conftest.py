import os
import random
import sys

import pytest
from fastapi.testclient import TestClient

# Ensure the project root (containing `core`, `services`, `api`) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from settings import Settings
from core.game_session import GameSession
from core.scheduler import ManualScheduler
from core.session_manager import SessionManager, get_session_manager
from main import app


class FakeClock:
    """Wall clock that only moves when told to"""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class RoundDriver:
    """Plays a round the way the UI would: flip two tiles, then let the timer fire"""

    def __init__(self, session, scheduler):
        self.session = session
        self.scheduler = scheduler

    def pairs(self):
        pairs = {}
        for tile in self.session.get_round_state().deck:
            pairs.setdefault(tile.pair_key, []).append(tile.id)
        return pairs

    def unmatched_keys(self):
        return sorted({
            tile.pair_key
            for tile in self.session.get_round_state().deck
            if not tile.is_matched
        })

    def flip_pair(self, first_id, second_id):
        self.session.flip(first_id)
        self.session.flip(second_id)
        return self.scheduler.run_pending()

    def match(self, pair_key=None):
        pair_key = pair_key or self.unmatched_keys()[0]
        first_id, second_id = self.pairs()[pair_key]
        self.flip_pair(first_id, second_id)
        return pair_key

    def miss(self):
        first_key, second_key = self.unmatched_keys()[:2]
        pairs = self.pairs()
        self.flip_pair(pairs[first_key][0], pairs[second_key][0])


@pytest.fixture()
def settings():
    return Settings(_env_file=None)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def session(settings, scheduler, clock):
    return GameSession(settings, scheduler=scheduler, rng=random.Random(1234), clock=clock)


@pytest.fixture()
def driver(session, scheduler):
    return RoundDriver(session, scheduler)


@pytest.fixture()
def manager(settings, scheduler):
    return SessionManager(settings, scheduler=scheduler)


@pytest.fixture()
def client(manager):
    app.dependency_overrides[get_session_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_driver(scheduler):
    return lambda game_session: RoundDriver(game_session, scheduler)
