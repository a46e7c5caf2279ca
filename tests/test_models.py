import pytest

from fonctions.errors import PlayerNotInMatch
from fonctions.match.models import extract_player_stats, parse_live_match, parse_match_record


SPECTATOR_PAYLOAD = {
    'gameId': 7001234567,
    'gameLength': 754,
    'gameMode': 'CLASSIC',
    'gameQueueConfigId': 420,
    'participants': [
        {'puuid': 'blue', 'championName': 'Ahri', 'teamId': 100, 'currentGold': 1320, 'championLevel': 9,
         'stats': {'kills': 4, 'deaths': 1, 'assists': 2, 'minionsKilled': 98}},
        {'puuid': 'red', 'championName': 'Zed', 'teamId': 200},
    ],
    'blueTeamStats': {'totalKills': 9},
    'redTeamStats': {'totalKills': 5},
}


def match_payload(**participant):
    base = {'puuid': 'p1', 'championName': 'Lux', 'teamPosition': 'UTILITY', 'kills': 2, 'deaths': 4,
            'assists': 14, 'totalMinionsKilled': 30, 'goldEarned': 9000, 'totalDamageDealtToChampions': 15000,
            'totalDamageTaken': 12000, 'visionScore': 55, 'win': True, 'challenges': {'kda': 4.0}}
    base.update(participant)
    return {'metadata': {'matchId': 'EUW1_42'},
            'info': {'gameDuration': 1500, 'gameCreation': 1700000000000, 'participants': [base]}}


def test_live_payload_to_snapshot() -> None:
    state = parse_live_match(SPECTATOR_PAYLOAD)

    snapshot = state.snapshot_for('blue')

    assert state.match_id == '7001234567'
    assert state.champion_for('blue') == 'Ahri'
    assert snapshot.kda_str == '4/1/2'
    assert snapshot.cs == 98
    assert snapshot.gold == 1320
    assert snapshot.level == 9
    assert (snapshot.team_kills, snapshot.enemy_team_kills) == (9, 5)


def test_missing_live_fields_default_to_zero() -> None:
    state = parse_live_match(SPECTATOR_PAYLOAD)

    snapshot = state.snapshot_for('red')

    assert snapshot.kills == 0
    assert snapshot.gold == 0
    assert snapshot.level == 1
    assert (snapshot.team_kills, snapshot.enemy_team_kills) == (5, 9)


def test_match_record() -> None:
    record = parse_match_record(match_payload(), 'p1')

    assert record.match_id == 'EUW1_42'
    assert record.champion_name == 'Lux'
    assert record.role == 'UTILITY'
    assert record.kda == 4.0
    assert record.cs_per_min == pytest.approx(1.2)
    assert record.win


def test_kda_without_challenges() -> None:
    assert parse_match_record(match_payload(challenges={}, deaths=0), 'p1').kda == 16.0


def test_player_not_in_match() -> None:
    with pytest.raises(PlayerNotInMatch):
        parse_match_record(match_payload(), 'someone-else')


def test_player_stats_for_roast() -> None:
    stats = extract_player_stats(match_payload(role='NONE'), 'p1')

    assert stats['role'] == 'UNKNOWN'
    assert stats['championName'] == 'Lux'
    assert stats['kda'] == 4.0
    assert stats['killParticipation'] == 0
