import asyncio

import pytest
from ollama import ResponseError

from conftest import FakeClient
from fonctions.commentary.generator import CommentaryGenerator, is_fallback_error
from fonctions.errors import GenerationFailed
from fonctions.live.detection import GameEvent
from fonctions.match.models import PlayerSnapshot


def test_fallback_errors() -> None:
    assert is_fallback_error(ResponseError('rate limit exceeded', 429))
    assert is_fallback_error(ResponseError('model "x" not found', 404))
    assert is_fallback_error(asyncio.TimeoutError())
    assert not is_fallback_error(ResponseError('invalid request', 400))


async def test_first_model_answers() -> None:
    client = FakeClient({'a': 'nice int'})
    generator = CommentaryGenerator(client=client, models=['a', 'b'])

    assert await generator.roast_player_name('Faker', 'KR1') == 'nice int'
    assert client.models == ['a']


async def test_rate_limit_switches_model() -> None:
    client = FakeClient({'a': ResponseError('rate limit exceeded', 429), 'b': 'backup roast'})
    generator = CommentaryGenerator(client=client, models=['a', 'b'])

    roast = await generator.roast_live_event(GameEvent.death(1), PlayerSnapshot(deaths=1), 'Yasuo')

    assert roast == 'backup roast'
    assert client.models == ['a', 'b']
    # le modèle de secours reste le modèle courant
    assert generator.current_model == 'b'


async def test_timeout_switches_model() -> None:
    client = FakeClient({'a': 'slow', 'b': 'fast'})
    generator = CommentaryGenerator(client=client, models=['a', 'b'], timeout=0.05)

    assert await generator.complete([{'role': 'user', 'content': 'hi'}]) == 'fast'


async def test_both_models_fail() -> None:
    client = FakeClient({'a': ResponseError('quota', 429), 'b': ResponseError('overloaded', 503)})
    generator = CommentaryGenerator(client=client, models=['a', 'b'])

    with pytest.raises(GenerationFailed):
        await generator.complete([{'role': 'user', 'content': 'hi'}])
    assert client.models == ['a', 'b']


async def test_non_fallback_error_is_not_retried() -> None:
    client = FakeClient({'a': ResponseError('invalid request', 400), 'b': 'unused'})
    generator = CommentaryGenerator(client=client, models=['a', 'b'])

    with pytest.raises(GenerationFailed):
        await generator.complete([{'role': 'user', 'content': 'hi'}])
    assert client.models == ['a']


async def test_single_model_has_no_fallback() -> None:
    client = FakeClient({'a': ResponseError('rate limit', 429)})
    generator = CommentaryGenerator(client=client, models=['a'])

    with pytest.raises(GenerationFailed):
        await generator.complete([{'role': 'user', 'content': 'hi'}])
    assert client.models == ['a']
