from fonctions.match.timeline import extract_timeline_roasts, participant_id_for

MINUTE = 60_000


def kill(minute, killer, victim, assists=()):
    return {'type': 'CHAMPION_KILL', 'timestamp': minute * MINUTE, 'killerId': killer, 'victimId': victim,
            'assistingParticipantIds': list(assists)}


TIMELINE = {
    'metadata': {'participants': ['a', 'p1', 'c']},
    'info': {'frames': [
        {'timestamp': 0, 'events': [kill(3, 7, 2), kill(5, 2, 8)]},
        {'timestamp': 20 * MINUTE, 'events': [kill(18, 1, 9, assists=[2]),
                                              {'type': 'BUILDING_KILL', 'timestamp': 19 * MINUTE, 'killerId': 2}]},
        {'timestamp': 35 * MINUTE, 'events': [kill(34, 6, 2), {'type': 'WARD_PLACED', 'timestamp': 34 * MINUTE}]},
    ]},
}


def test_participant_id_from_metadata() -> None:
    assert participant_id_for(TIMELINE, 'p1') == 2
    assert participant_id_for(TIMELINE, 'nobody') is None


def test_key_moments() -> None:
    resume = extract_timeline_roasts(TIMELINE, 'p1')

    assert (resume['totalKills'], resume['totalDeaths'], resume['totalAssists']) == (1, 2, 1)
    assert resume['earlyGameStruggles'] == ['Died at 3m (feeding early)']
    assert resume['lateGameFailures'] == ['Died at 34m (critical moment)']
    assert resume['keyMoments'] == ['Early game kill at 5m (possibly lucky)', 'Split pushing early at 19m']


def test_unknown_player_gives_empty_resume() -> None:
    resume = extract_timeline_roasts(TIMELINE, 'nobody')

    assert resume['totalKills'] == 0
    assert resume['keyMoments'] == []
