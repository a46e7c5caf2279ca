"""
Module match - Données de match League of Legends.

Structure des modules:
- riot_api.py: Appels à l'API Riot Games et traduction des erreurs HTTP
- models.py: PlayerSnapshot, LiveMatchState, MatchRecord et parsing des payloads
- fetcher.py: MatchFetcher, accès uniforme partie en cours / historique / timeline
- timeline.py: Moments clés d'un joueur dans la timeline

Usage:
    from fonctions.match import MatchFetcher

    fetcher = MatchFetcher()
    live = await fetcher.fetch_live_match(puuid)
    snapshot = live.snapshot_for(puuid)
"""

from .models import (
    PlayerSnapshot,
    LiveMatchState,
    MatchRecord,
    parse_live_match,
    parse_match_record,
    extract_player_stats,
)
from .fetcher import MatchFetcher
from .timeline import extract_timeline_roasts

__all__ = [
    # Modèles
    'PlayerSnapshot',
    'LiveMatchState',
    'MatchRecord',
    'parse_live_match',
    'parse_match_record',
    'extract_player_stats',

    # API Riot
    'MatchFetcher',

    # Timeline
    'extract_timeline_roasts',
]
