import asyncio

import pytest

from conftest import FakeClient, FakeCommentary, FakeFetcher, FakeStore, live_state
from fonctions.commentary.generator import CommentaryGenerator
from fonctions.errors import (NoActiveMatch,
                              PersistenceError,
                              SessionAlreadyActive,
                              TransientProviderError)
from fonctions.live.detection import EventKind
from fonctions.live.session import SessionState
from fonctions.live.tracker import SessionTracker

CHANNEL = 42


def make_tracker(fetcher, send, clock, commentary=None, store=None, timeout=1):
    return SessionTracker(fetcher,
                          commentary if commentary is not None else FakeCommentary(),
                          store if store is not None else FakeStore(),
                          send,
                          poll_interval=3600,
                          status_interval=15,
                          timeout=timeout,
                          clock=clock)


async def started(tracker, fetcher, user_id='u1'):
    """Démarre une session puis pose la base de comparaison (premier tick)."""
    session = await tracker.start(user_id, 'p1', CHANNEL)
    assert await tracker.poll_once(user_id)
    return session


async def test_start_creates_tracking_session(send, clock) -> None:
    store = FakeStore()
    tracker = make_tracker(FakeFetcher([live_state()]), send, clock, store=store)

    session = await tracker.start('u1', 'p1', CHANNEL)

    assert session.state == SessionState.TRACKING
    assert session.champion_name == 'Ahri'
    assert session.message_id == '1001'
    assert tracker.is_tracking('u1')
    assert 'LIVE MATCH TRACKING STARTED' in send.texts[0]
    assert store.saved['u1']['match_id'] == 'EUW1_1'
    await tracker.stop_all()


async def test_second_start_is_rejected(send, clock) -> None:
    tracker = make_tracker(FakeFetcher([live_state()]), send, clock)
    first = await tracker.start('u1', 'p1', CHANNEL)

    with pytest.raises(SessionAlreadyActive):
        await tracker.start('u1', 'p1', CHANNEL)

    assert tracker.get('u1') is first
    assert len(tracker.active_sessions()) == 1
    await tracker.stop_all()


async def test_start_without_live_game(send, clock) -> None:
    tracker = make_tracker(FakeFetcher([None]), send, clock)

    with pytest.raises(NoActiveMatch):
        await tracker.start('u1', 'p1', CHANNEL)

    assert not tracker.is_tracking('u1')
    assert send.messages == []


async def test_first_tick_only_sets_baseline(send, clock) -> None:
    fetcher = FakeFetcher([live_state(kills=4, deaths=3)])
    tracker = make_tracker(fetcher, send, clock)

    session = await started(tracker, fetcher)

    assert session.events == []
    assert len(send.messages) == 1
    assert session.last_snapshot.kills == 4
    await tracker.stop_all()


async def test_kill_is_announced_with_flavor(send, clock) -> None:
    fetcher = FakeFetcher([live_state(kills=0)])
    tracker = make_tracker(fetcher, send, clock, commentary=FakeCommentary('clean'))
    session = await started(tracker, fetcher)

    fetcher.push(live_state(kills=1))
    assert await tracker.poll_once('u1')

    assert [event.kind for event in session.events] == [EventKind.KILL]
    assert session.emitted_event_count == 1
    assert 'KILL!' in send.texts[-1]
    assert '🎙️ *clean*' in send.texts[-1]
    await tracker.stop_all()


async def test_multikill_sends_a_single_message(send, clock) -> None:
    fetcher = FakeFetcher([live_state(kills=2)])
    tracker = make_tracker(fetcher, send, clock)
    session = await started(tracker, fetcher)
    before = len(send.messages)

    fetcher.push(live_state(kills=5))
    await tracker.poll_once('u1')

    assert [event.kind for event in session.events] == [EventKind.MULTIKILL]
    assert len(send.messages) == before + 1
    assert '3x MULTIKILL' in send.texts[-1]
    await tracker.stop_all()


async def test_generation_failure_falls_back_to_template(send, clock) -> None:
    fetcher = FakeFetcher([live_state(deaths=0)])
    tracker = make_tracker(fetcher, send, clock, commentary=FakeCommentary(fail=True))
    await started(tracker, fetcher)

    fetcher.push(live_state(deaths=1))
    assert await tracker.poll_once('u1')

    assert 'DEAD AGAIN' in send.texts[-1]
    assert '🎙️' not in send.texts[-1]
    await tracker.stop_all()


async def test_events_of_a_tick_are_sent_in_order(send, clock) -> None:
    fetcher = FakeFetcher([live_state(kills=1, deaths=1, gold=1500, game_length=400)])
    commentary = FakeCommentary('roasted', fail_on={1})
    tracker = make_tracker(fetcher, send, clock, commentary=commentary)
    session = await started(tracker, fetcher)
    before = len(send.messages)

    fetcher.push(live_state(kills=2, deaths=2, gold=800, game_length=410))
    assert await tracker.poll_once('u1')

    assert [event.kind for event in session.events] == [EventKind.KILL, EventKind.DEATH, EventKind.GOLD_SWING]
    kill, death, gold = send.texts[before:]
    assert 'KILL!' in kill and '🎙️' not in kill
    assert 'DEAD AGAIN' in death and '🎙️ *roasted*' in death
    assert 'MASSIVE GOLD LOSS' in gold and '🎙️ *roasted*' in gold
    assert session.emitted_event_count == 3
    await tracker.stop_all()


async def test_slow_commentary_does_not_block_status(send, clock) -> None:
    fetcher = FakeFetcher([live_state(kills=0)])
    tracker = make_tracker(fetcher, send, clock, commentary=FakeCommentary(delay=1), timeout=0.2)
    await started(tracker, fetcher)

    fetcher.push(live_state(kills=1))
    clock.now = 15
    assert await tracker.poll_once('u1')

    assert 'KILL!' in send.texts[-2]
    assert '🎙️' not in send.texts[-2]
    assert 'Live Match Update' in send.texts[-1]
    await tracker.stop_all()


async def test_slow_model_falls_back_to_backup_model(send, clock) -> None:
    generator = CommentaryGenerator(client=FakeClient({'a': 'slow', 'b': 'backup roast'}),
                                    models=['a', 'b'],
                                    timeout=0.2)
    fetcher = FakeFetcher([live_state(kills=0)])
    tracker = make_tracker(fetcher, send, clock, commentary=generator, timeout=0.2)
    await started(tracker, fetcher)

    fetcher.push(live_state(kills=1))
    assert await tracker.poll_once('u1')

    assert 'KILL!' in send.texts[-1]
    assert '🎙️ *backup roast*' in send.texts[-1]
    assert generator.client.models == ['a', 'b']
    assert generator.current_model == 'b'
    await tracker.stop_all()


async def test_fetch_error_keeps_session(send, clock) -> None:
    fetcher = FakeFetcher([live_state()])
    tracker = make_tracker(fetcher, send, clock)
    await started(tracker, fetcher)

    fetcher.push(TransientProviderError('429', status=429))
    assert await tracker.poll_once('u1')
    assert tracker.is_tracking('u1')

    fetcher.push(live_state(kills=1))
    assert await tracker.poll_once('u1')
    assert tracker.get('u1').emitted_event_count == 1
    await tracker.stop_all()


async def test_match_end_sends_summary_and_persists(send, clock) -> None:
    store = FakeStore()
    fetcher = FakeFetcher([live_state()])
    tracker = make_tracker(fetcher, send, clock, store=store)
    session = await started(tracker, fetcher)
    fetcher.push(live_state(kills=1))
    await tracker.poll_once('u1')

    fetcher.push(None)
    assert not await tracker.poll_once('u1')

    assert not tracker.is_tracking('u1')
    assert session.state == SessionState.ENDED
    assert 'MATCH ENDED' in send.texts[-1]
    assert store.ended == [('u1', 1)]


async def test_new_match_id_ends_session(send, clock) -> None:
    fetcher = FakeFetcher([live_state(match_id='EUW1_1')])
    tracker = make_tracker(fetcher, send, clock)
    await started(tracker, fetcher)

    fetcher.push(live_state(match_id='EUW1_2'))
    assert not await tracker.poll_once('u1')
    assert not tracker.is_tracking('u1')


async def test_status_update_every_interval(send, clock) -> None:
    fetcher = FakeFetcher([live_state(game_length=125)])
    tracker = make_tracker(fetcher, send, clock)
    await started(tracker, fetcher)
    assert not any('Live Match Update' in text for text in send.texts)

    clock.now = 15
    await tracker.poll_once('u1')
    assert 'Live Match Update' in send.texts[-1]
    assert 'Game Time: 2m 5s' in send.texts[-1]

    nb_messages = len(send.messages)
    clock.now = 20
    await tracker.poll_once('u1')
    assert len(send.messages) == nb_messages
    await tracker.stop_all()


async def test_stop_is_idempotent(send, clock) -> None:
    store = FakeStore()
    tracker = make_tracker(FakeFetcher([live_state()]), send, clock, store=store)
    session = await tracker.start('u1', 'p1', CHANNEL)
    task = session.task

    assert await tracker.stop('u1')
    assert not await tracker.stop('u1')

    assert task.cancelled() or task.done()
    assert store.ended == [('u1', 0)]
    assert not await tracker.poll_once('u1')


async def test_stop_all_survives_persistence_errors(send, clock) -> None:
    store = FakeStore(fail_on_end=PersistenceError('db down'))
    tracker = make_tracker(FakeFetcher([live_state()]), send, clock, store=store)
    await tracker.start('u1', 'p1', CHANNEL)
    await tracker.start('u2', 'p1', CHANNEL)

    await tracker.stop_all()

    assert tracker.active_sessions() == []


async def test_poll_loop_runs_ticks(send, clock) -> None:
    fetcher = FakeFetcher([live_state()])
    tracker = make_tracker(fetcher, send, clock)
    tracker.poll_interval = 0.01
    await tracker.start('u1', 'p1', CHANNEL)

    await asyncio.sleep(0.1)

    assert fetcher.calls > 1
    await tracker.stop('u1')


async def test_retire_orphans_skips_live_sessions(send, clock) -> None:
    store = FakeStore(active_rows=[{'discord_id': 'u1'}, {'discord_id': 'old'}])
    tracker = make_tracker(FakeFetcher([live_state()]), send, clock, store=store)
    await tracker.start('u1', 'p1', CHANNEL)

    assert await tracker.retire_orphans() == 1
    assert store.ended == [('old', None)]
    await tracker.stop_all()
