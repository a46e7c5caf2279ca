"""
Module stats - Analyse de l'historique de matchs.

- aggregation.py: statistiques agrégées sur les N derniers matchs
- recommendations.py: score d'adéquation par champion et rapport
- roasts.py: roast statistique
"""

from .aggregation import AggregateStats, ChampionRecord, analyze_match_history, compute_statistics
from .recommendations import ChampionFitScore, Recommendations, analyze_champion_recommendations, build_champion_report
from .roasts import generate_stats_roast, stats_roast_candidates

__all__ = [
    'AggregateStats',
    'ChampionRecord',
    'analyze_match_history',
    'compute_statistics',
    'ChampionFitScore',
    'Recommendations',
    'analyze_champion_recommendations',
    'build_champion_report',
    'generate_stats_roast',
    'stats_roast_candidates',
]
