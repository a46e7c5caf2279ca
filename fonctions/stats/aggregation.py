"""
Analyse de l'historique : récupération des N derniers matchs et calcul des
statistiques agrégées (moyennes, détail par champion, meilleur/pire champion).
"""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import pandas as pd

from fonctions.errors import NoMatchesFound
from fonctions.match.models import MatchRecord
from utils.params import MAX_MATCH_COUNT

log = logging.getLogger(__name__)

HIGH_DEATH_GAME = 8


def arrondi(value: float, digits: int = 0) -> float:
    """Arrondi au plus proche, les demis vers le haut (0.5 -> 1)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass
class ChampionRecord:
    name: str
    wins: int = 0
    losses: int = 0
    kda_samples: list[float] = field(default_factory=list)
    games: int = 0

    @property
    def win_rate(self) -> float:
        return self.wins * 100 / self.games if self.games else 0.0


@dataclass(frozen=True)
class ChampionSummary:
    name: str
    win_rate: int
    games: int


@dataclass
class AggregateStats:
    total_games: int
    wins: int
    losses: int
    win_rate: float
    avg_kills: float
    avg_deaths: float
    avg_assists: float
    avg_kda: float
    avg_cs: float
    avg_cs_per_min: float
    avg_gold: float
    avg_damage: float
    avg_vision: float
    champions: dict[str, ChampionRecord]
    best_champion: Optional[ChampionSummary]
    worst_champion: Optional[ChampionSummary]
    high_death_games: int
    max_deaths: int
    matches: list[MatchRecord] = field(default_factory=list)

    def champions_by_games(self) -> list[ChampionRecord]:
        """Champions les plus joués d'abord ; à égalité, ordre de rencontre."""
        return sorted(self.champions.values(), key=lambda c: c.games, reverse=True)


def records_to_df(records: list[MatchRecord]) -> pd.DataFrame:
    df = pd.DataFrame([asdict(record) for record in records])
    df['cs_per_min'] = [record.cs_per_min for record in records]
    return df


def _champion_breakdown(df: pd.DataFrame) -> dict[str, ChampionRecord]:
    champions = {}
    # sort=False : les champions restent dans l'ordre de rencontre
    for name, games in df.groupby('champion_name', sort=False):
        wins = int(games['win'].sum())
        champions[name] = ChampionRecord(name=name,
                                         wins=wins,
                                         losses=len(games) - wins,
                                         kda_samples=[float(kda) for kda in games['kda']],
                                         games=len(games))
    return champions


def _summary(champion: ChampionRecord) -> ChampionSummary:
    return ChampionSummary(name=champion.name, win_rate=int(arrondi(champion.win_rate)), games=champion.games)


def compute_statistics(records: list[MatchRecord]) -> AggregateStats:
    """Réduit une fenêtre de matchs en statistiques. Lève NoMatchesFound si vide."""
    if not records:
        raise NoMatchesFound()

    df = records_to_df(records)
    total_games = len(df)
    wins = int(df['win'].sum())

    champions = _champion_breakdown(df)
    # tri stable : à winrate égal, le premier rencontré reste devant
    ranked = sorted(champions.values(), key=lambda c: c.win_rate, reverse=True)

    return AggregateStats(
        total_games=total_games,
        wins=wins,
        losses=total_games - wins,
        win_rate=arrondi(wins * 100 / total_games, 1),
        avg_kills=arrondi(df['kills'].mean(), 2),
        avg_deaths=arrondi(df['deaths'].mean(), 2),
        avg_assists=arrondi(df['assists'].mean(), 2),
        avg_kda=arrondi(df['kda'].mean(), 2),
        avg_cs=arrondi(df['cs'].mean(), 1),
        avg_cs_per_min=arrondi(df['cs_per_min'].mean(), 1),
        avg_gold=arrondi(df['gold'].mean()),
        avg_damage=arrondi(df['damage'].mean()),
        avg_vision=arrondi(df['vision_score'].mean(), 1),
        champions=champions,
        best_champion=_summary(ranked[0]),
        worst_champion=_summary(ranked[-1]),
        high_death_games=int((df['deaths'] >= HIGH_DEATH_GAME).sum()),
        max_deaths=int(df['deaths'].max()),
        matches=list(records),
    )


async def fetch_match_records(fetcher, puuid: str, match_count: int = 10) -> list[MatchRecord]:
    """Ids des N derniers matchs puis tous les matchs en parallèle.

    Un seul échec fait échouer l'ensemble : pas de statistiques sur une fenêtre incomplète.
    """
    match_count = min(int(match_count), MAX_MATCH_COUNT)
    if match_count <= 0:
        raise NoMatchesFound(puuid)

    match_ids = await fetcher.fetch_match_ids(puuid, match_count)
    if not match_ids:
        raise NoMatchesFound(puuid)

    # gather conserve l'ordre de la requête (le plus récent en premier)
    return list(await asyncio.gather(*[fetcher.fetch_match_record(match_id, puuid)
                                       for match_id in match_ids[:match_count]]))


async def analyze_match_history(fetcher, puuid: str, match_count: int = 10) -> AggregateStats:
    records = await fetch_match_records(fetcher, puuid, match_count)
    stats = compute_statistics(records)
    log.info(f'[Stats] {stats.total_games} matchs analysés pour {puuid} ({stats.win_rate}% WR)')
    return stats
