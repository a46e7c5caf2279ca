import asyncio
from types import SimpleNamespace

import pytest

from fonctions.errors import GenerationFailed
from fonctions.match.models import LiveMatchState, MatchRecord


# =============================================================================
# CONSTRUCTEURS
# =============================================================================

def live_state(match_id: str = 'EUW1_1',
               puuid: str = 'p1',
               kills: int = 0,
               deaths: int = 0,
               assists: int = 0,
               gold: int = 500,
               cs: int = 0,
               game_length: int = 120,
               champion: str = 'Ahri') -> LiveMatchState:
    return LiveMatchState(match_id=match_id,
                          game_length=game_length,
                          game_mode='CLASSIC',
                          queue_id=420,
                          participants=[{'puuid': puuid,
                                         'championName': champion,
                                         'teamId': 100,
                                         'currentGold': gold,
                                         'championLevel': 3,
                                         'stats': {'kills': kills,
                                                   'deaths': deaths,
                                                   'assists': assists,
                                                   'minionsKilled': cs}}],
                          blue_kills=kills,
                          red_kills=deaths)


def record(match_id: str = 'EUW1_1',
           champion: str = 'Ahri',
           win: bool = True,
           kills: int = 5,
           deaths: int = 3,
           assists: int = 7,
           kda: float = 4.0,
           cs: int = 180,
           duration: int = 1800) -> MatchRecord:
    return MatchRecord(match_id=match_id,
                       champion_name=champion,
                       role='MIDDLE',
                       kills=kills,
                       deaths=deaths,
                       assists=assists,
                       kda=kda,
                       cs=cs,
                       gold=11000,
                       damage=20000,
                       damage_taken=15000,
                       vision_score=20,
                       win=win,
                       duration=duration,
                       created_at=0)


# =============================================================================
# FAKES
# =============================================================================

class FakeFetcher:
    """Rejoue des états live ; une exception dans la file est levée."""

    def __init__(self, states=None):
        self.states = list(states or [])
        self.last = None
        self.calls = 0

    def push(self, *states):
        self.states.extend(states)

    async def fetch_live_match(self, puuid):
        self.calls += 1
        if self.states:
            self.last = self.states.pop(0)
        if isinstance(self.last, Exception):
            error, self.last = self.last, None
            raise error
        return self.last


class FakeStore:
    def __init__(self, active_rows=None, fail_on_end: Exception = None):
        self.saved = {}
        self.ended = []
        self.active_rows = list(active_rows or [])
        self.fail_on_end = fail_on_end

    def save_live_session(self, session_id, state):
        self.saved[session_id] = state

    def end_live_session(self, session_id, emitted_events=None):
        if self.fail_on_end is not None:
            raise self.fail_on_end
        self.ended.append((session_id, emitted_events))

    def get_active_live_sessions(self):
        return self.active_rows


class FakeCommentary:
    """`fail_on` : numéros d'appel (à partir de 1) qui échouent."""

    def __init__(self, flavor='what a play', fail=False, fail_on=(), delay=0):
        self.flavor = flavor
        self.fail = fail
        self.fail_on = set(fail_on)
        self.delay = delay
        self.calls = []

    async def roast_live_event(self, event, state, champion_name):
        self.calls.append(event)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail or len(self.calls) in self.fail_on:
            raise GenerationFailed('all models down')
        return self.flavor


class FakeClient:
    """Client ollama : réponse par modèle, une exception est levée, 'slow' fait attendre."""

    def __init__(self, answers):
        self.answers = answers
        self.models = []

    async def chat(self, model, messages, options=None):
        self.models.append(model)
        answer = self.answers[model]
        if isinstance(answer, Exception):
            raise answer
        if answer == 'slow':
            await asyncio.sleep(1)
        return {'message': {'role': 'assistant', 'content': f'  {answer}  '}}


class FakeSend:
    def __init__(self):
        self.messages = []

    async def __call__(self, channel_id, text):
        self.messages.append((channel_id, text))
        return SimpleNamespace(id=1000 + len(self.messages))

    @property
    def texts(self):
        return [text for _, text in self.messages]


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def send():
    return FakeSend()
