"""
Modèles de données des matchs (historique et partie en cours) et conversion
depuis les payloads JSON de l'API Riot.
"""

from dataclasses import dataclass, field
from typing import Optional

from fonctions.errors import PlayerNotInMatch


# =============================================================================
# PARTIE EN COURS
# =============================================================================

@dataclass(frozen=True)
class PlayerSnapshot:
    """Lecture ponctuelle de l'état d'un joueur dans une partie en cours."""
    game_duration: int = 0
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    cs: int = 0
    gold: int = 0
    level: int = 1
    team_kills: int = 0
    enemy_team_kills: int = 0

    @property
    def kda_str(self) -> str:
        return f"{self.kills}/{self.deaths}/{self.assists}"

    def as_dict(self) -> dict:
        return {
            'game_duration': self.game_duration,
            'kills': self.kills,
            'deaths': self.deaths,
            'assists': self.assists,
            'cs': self.cs,
            'gold': self.gold,
            'level': self.level,
            'team_kills': self.team_kills,
            'enemy_team_kills': self.enemy_team_kills,
        }


@dataclass
class LiveMatchState:
    match_id: str
    game_length: int = 0
    game_mode: str = 'UNKNOWN'
    queue_id: int = 0
    participants: list = field(default_factory=list)
    blue_kills: int = 0
    red_kills: int = 0

    def participant(self, puuid: str) -> Optional[dict]:
        for p in self.participants:
            if p.get('puuid') == puuid:
                return p
        return None

    def champion_for(self, puuid: str) -> str:
        p = self.participant(puuid) or {}
        return p.get('championName') or 'Champion'

    def snapshot_for(self, puuid: str) -> PlayerSnapshot:
        """Snapshot du joueur. Les champs absents valent 0 (niveau 1)."""
        p = self.participant(puuid) or {}
        stats = p.get('stats') or {}

        if p.get('teamId', 100) == 100:
            team_kills, enemy_kills = self.blue_kills, self.red_kills
        else:
            team_kills, enemy_kills = self.red_kills, self.blue_kills

        return PlayerSnapshot(
            game_duration=int(self.game_length or 0),
            kills=int(stats.get('kills') or 0),
            deaths=int(stats.get('deaths') or 0),
            assists=int(stats.get('assists') or 0),
            cs=int(stats.get('minionsKilled') or 0),
            gold=int(p.get('currentGold') or 0),
            level=int(p.get('championLevel') or 1),
            team_kills=int(team_kills or 0),
            enemy_team_kills=int(enemy_kills or 0),
        )


def parse_live_match(payload: dict) -> LiveMatchState:
    """Payload spectator -> LiveMatchState."""
    return LiveMatchState(
        match_id=str(payload['gameId']),
        game_length=int(payload.get('gameLength') or 0),
        game_mode=payload.get('gameMode') or 'UNKNOWN',
        queue_id=int(payload.get('gameQueueConfigId') or 0),
        participants=list(payload.get('participants') or []),
        blue_kills=int((payload.get('blueTeamStats') or {}).get('totalKills') or 0),
        red_kills=int((payload.get('redTeamStats') or {}).get('totalKills') or 0),
    )


# =============================================================================
# HISTORIQUE
# =============================================================================

@dataclass(frozen=True)
class MatchRecord:
    match_id: str
    champion_name: str
    role: str
    kills: int
    deaths: int
    assists: int
    kda: float
    cs: int
    gold: int
    damage: int
    damage_taken: int
    vision_score: int
    win: bool
    duration: int
    created_at: int

    @property
    def cs_per_min(self) -> float:
        return self.cs / max(1, self.duration / 60)


def _find_participant(payload: dict, puuid: str) -> dict:
    for participant in payload.get('info', {}).get('participants', []):
        if participant.get('puuid') == puuid:
            return participant
    raise PlayerNotInMatch(payload.get('metadata', {}).get('matchId', ''), puuid)


def _kda(participant: dict) -> float:
    kda = (participant.get('challenges') or {}).get('kda')
    if kda:
        return float(kda)
    return (participant.get('kills', 0) + participant.get('assists', 0)) / max(participant.get('deaths', 0), 1)


def parse_match_record(payload: dict, puuid: str) -> MatchRecord:
    """Extrait les données utiles du joueur dans un match-v5."""
    participant = _find_participant(payload, puuid)
    info = payload['info']

    return MatchRecord(
        match_id=payload['metadata']['matchId'],
        champion_name=participant['championName'],
        role=participant.get('teamPosition') or 'UNKNOWN',
        kills=participant.get('kills', 0),
        deaths=participant.get('deaths', 0),
        assists=participant.get('assists', 0),
        kda=_kda(participant),
        cs=participant.get('totalMinionsKilled', 0),
        gold=participant.get('goldEarned', 0),
        damage=participant.get('totalDamageDealtToChampions', 0),
        damage_taken=participant.get('totalDamageTaken', 0),
        vision_score=participant.get('visionScore', 0),
        win=bool(participant.get('win')),
        duration=info.get('gameDuration', 0),
        created_at=info.get('gameCreation', 0),
    )


def extract_player_stats(payload: dict, puuid: str) -> dict:
    """Stats détaillées d'un joueur sur un match, pour le roast de la dernière partie."""
    participant = _find_participant(payload, puuid)
    challenges = participant.get('challenges') or {}

    role = (participant.get('role') or participant.get('teamPosition') or participant.get('lane')
            or participant.get('individualPosition') or 'UNKNOWN')
    if role in ('Invalid', 'NONE', ''):
        role = 'UNKNOWN'

    return {
        'summonerName': participant.get('riotIdGameName') or participant.get('summonerName') or 'Unknown',
        'championName': participant['championName'],
        'role': role,
        'champLevel': participant.get('champLevel', 1),
        'kills': participant.get('kills', 0),
        'deaths': participant.get('deaths', 0),
        'assists': participant.get('assists', 0),
        'kda': _kda(participant),
        'goldEarned': participant.get('goldEarned', 0),
        'goldSpent': participant.get('goldSpent', 0),
        'physicalDamageDealtToChampions': participant.get('physicalDamageDealtToChampions', 0),
        'magicDamageDealtToChampions': participant.get('magicDamageDealtToChampions', 0),
        'totalDamageDealtToChampions': participant.get('totalDamageDealtToChampions', 0),
        'totalDamageTaken': participant.get('totalDamageTaken', 0),
        'damageSelfMitigated': participant.get('damageSelfMitigated', 0),
        'visionScore': participant.get('visionScore', 0),
        'wardsPlaced': participant.get('wardsPlaced', 0),
        'wardsKilled': participant.get('wardTakedowns', 0),
        'totalMinionsKilled': participant.get('totalMinionsKilled', 0),
        'totalTimeSpentDead': participant.get('totalTimeSpentDead', 0),
        'longestTimeSpentLiving': participant.get('longestTimeSpentLiving', 0),
        'win': bool(participant.get('win')),
        'killParticipation': challenges.get('killParticipation', 0),
        'damagePerMinute': challenges.get('damagePerMinute', 0),
        'goldPerMinute': challenges.get('goldPerMinute', 0),
        'deathsByEnemyChamps': challenges.get('deathsByEnemyChamps', 0),
        'itemsPurchased': participant.get('itemsPurchased', 0),
        'largestCriticalStrike': participant.get('largestCriticalStrike', 0),
        'largestKillingSpree': participant.get('largestKillingSpree', 0),
        'multikills': participant.get('multikills', 0),
        'doubleKills': participant.get('doubleKills', 0),
        'tripleKills': participant.get('tripleKills', 0),
    }
