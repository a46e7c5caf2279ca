"""
Roast statistique : chaque règle vérifiée sur les stats agrégées ajoute une
phrase candidate, une seule est tirée au hasard.
"""

import random

from fonctions.stats.aggregation import AggregateStats


DEFAULT_ROAST = "You exist. That's about all I can say about your play."


def stats_roast_candidates(stats: AggregateStats) -> list[str]:
    roasts = []

    # winrate
    if stats.win_rate <= 40:
        roasts.append(f"With a {stats.win_rate}% win rate, you're losing more than a casino. "
                      "Maybe it's time to accept you're not climbing out of your rank.")
    elif stats.win_rate < 50:
        roasts.append(f"{stats.win_rate}% win rate is basically 50/50 - you're a coin flip. "
                      "Your team can't tell if you're an asset or a liability.")
    elif stats.win_rate >= 55:
        roasts.append(f"Oh wow, {stats.win_rate}% win rate. Congrats on being slightly above average - "
                      "your team probably still mutes you though.")

    # morts
    if stats.avg_deaths > 7:
        roasts.append(f"Averaging {stats.avg_deaths} deaths per game? You're not a player, you're a feeding "
                      "simulator. Your teammates see you as enemy gold.")
    elif stats.avg_deaths > 5:
        roasts.append(f"{stats.avg_deaths} deaths per game average - you're trying to set a record for "
                      "respawn timer speedrun.")

    # pool de champions
    best, worst = stats.best_champion, stats.worst_champion
    if best is not None and worst is not None:
        diff = best.win_rate - worst.win_rate
        if diff >= 30:
            roasts.append(f"You're {diff}% better on {best.name} than {worst.name}. Stop picking {worst.name} - "
                          "you're torturing your team.")

    # farm
    if stats.avg_cs_per_min < 4:
        roasts.append(f"{stats.avg_cs_per_min} CS per minute? Were you afk? That's support numbers and "
                      "you're not even playing support.")
    elif stats.avg_cs_per_min < 5:
        roasts.append(f"Averaging {stats.avg_cs_per_min} CS/min - you're more interested in roaming into "
                      "enemy territory to die than farming.")

    if stats.high_death_games > stats.total_games * 0.5:
        roasts.append("You die 8+ times in more than half your games. You're either inting or just "
                      "genuinely terrible at staying alive.")

    return roasts


def generate_stats_roast(stats: AggregateStats, rng: random.Random = None) -> str:
    candidates = stats_roast_candidates(stats)
    if not candidates:
        return DEFAULT_ROAST
    return (rng or random).choice(candidates)
