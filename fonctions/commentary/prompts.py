"""
Construction des prompts envoyés au LLM. Fonctions pures : données -> messages.
"""

from fonctions.live.detection import EventKind, GameEvent
from fonctions.match.models import PlayerSnapshot


ROASTER_PERSONA = ("You are the MOST RUTHLESS, SAVAGE League of Legends roaster alive. "
                   "No mercy, no holding back.")


def _user(content: str) -> list[dict]:
    return [{'role': 'user', 'content': content}]


def name_roast_prompt(game_name: str, tag_line: str) -> list[dict]:
    return _user(f"{ROASTER_PERSONA} Roast this gamer name like you're trying to destroy their confidence. "
                 f"1-2 sentences MAX.\n\nROAST THIS PATHETIC GAMER ID: {game_name}#{tag_line}")


def match_roast_prompt(stats: dict) -> list[dict]:
    stats_text = (
        f"CHAMPION: {stats['championName']} (Level {stats['champLevel']})\n"
        f"ROLE: {stats['role']}\n"
        f"KILLS/DEATHS/ASSISTS: {stats['kills']}/{stats['deaths']}/{stats['assists']}\n"
        f"KDA RATIO: {stats['kda']:.2f}\n"
        f"KILL PARTICIPATION: {stats['killParticipation'] * 100:.1f}%\n"
        f"DEATHS BY ENEMY CHAMPS: {stats['deathsByEnemyChamps']}\n"
        f"TIME DEAD: {stats['totalTimeSpentDead']}s\n"
        f"LONGEST TIME ALIVE: {stats['longestTimeSpentLiving']}s\n\n"
        "FARMING:\n"
        f"- CS: {stats['totalMinionsKilled']}\n"
        f"- Gold Earned: {stats['goldEarned']}\n"
        f"- Gold Per Minute: {stats['goldPerMinute']:.2f}\n\n"
        "DAMAGE:\n"
        f"- Total Damage to Champs: {stats['totalDamageDealtToChampions']}\n"
        f"- Damage Per Minute: {stats['damagePerMinute']:.2f}\n"
        f"- Damage Taken: {stats['totalDamageTaken']}\n\n"
        "UTILITY:\n"
        f"- Vision Score: {stats['visionScore']}\n"
        f"- Wards Placed: {stats['wardsPlaced']}\n"
        f"- Largest Killing Spree: {stats['largestKillingSpree']}\n\n"
        f"RESULT: {'VICTORY' if stats['win'] else 'DEFEAT'}"
    )
    return _user(f"{ROASTER_PERSONA}\n\nBRUTALLY ROAST THIS PLAYER USING THEIR STATS:\n{stats_text}\n\n"
                 "Requirements:\n"
                 "- One paragraph, 3-5 sentences\n"
                 "- Use SPECIFIC stats to justify every roast\n"
                 "- Deaths, damage, CS, vision: mock whatever is bad")


def timeline_roast_prompt(stats: dict, timeline: dict) -> list[dict]:
    early = '\n'.join(timeline['earlyGameStruggles']) or 'Somehow survived early game'
    moments = '\n'.join(timeline['keyMoments'][:5]) or 'No significant moments recorded'
    late = '\n'.join(timeline['lateGameFailures']) or 'Managed not to int in late game'

    timeline_text = (
        f"PLAYER: {stats['summonerName']} on {stats['championName']} ({stats['role']})\n\n"
        f"EARLY GAME DISASTERS:\n{early}\n\n"
        f"KEY GAME MOMENTS:\n{moments}\n\n"
        f"LATE GAME FAILURES:\n{late}\n\n"
        f"K/D/A: {timeline['totalKills']}/{timeline['totalDeaths']}/{timeline['totalAssists']}\n"
        f"MATCH RESULT: {'SOMEHOW WON' if stats['win'] else 'PATHETIC LOSS'}"
    )
    return _user("You are a SADISTIC, BRUTAL League analyst. Dissect this player's game timeline and expose "
                 f"every mistake.\n\n{timeline_text}\n\n"
                 "Reference specific deaths at specific times. 3-5 sentences.")


_EVENT_DESCRIPTIONS = {
    EventKind.KILL: 'just got {value} kill(s)',
    EventKind.MULTIKILL: 'just got a {value}x multikill',
    EventKind.DEATH: 'just died',
    EventKind.FEEDING: 'just died {value} times in a row',
    EventKind.GOLD_SWING: 'just lost {value} gold in the early game',
}


def live_event_prompt(event: GameEvent, state: PlayerSnapshot, champion_name: str) -> list[dict]:
    description = _EVENT_DESCRIPTIONS[event.kind].format(value=event.value)
    minutes = state.game_duration // 60
    return _user(f"{ROASTER_PERSONA} A player on {champion_name} {description} at minute {minutes}. "
                 f"Current K/D/A {state.kda_str}, {state.cs} CS, level {state.level}, "
                 f"team score {state.team_kills} vs {state.enemy_team_kills}. "
                 "Commentate it in ONE short savage sentence.")


def stats_summary_prompt(stats) -> list[dict]:
    best = f"{stats.best_champion.name} ({stats.best_champion.win_rate}% WR)" if stats.best_champion else 'none'
    worst = f"{stats.worst_champion.name} ({stats.worst_champion.win_rate}% WR)" if stats.worst_champion else 'none'
    return _user(f"{ROASTER_PERSONA} Summarise this player's last {stats.total_games} games in one savage "
                 f"sentence: {stats.win_rate}% win rate, average K/D/A {stats.avg_kills}/{stats.avg_deaths}/"
                 f"{stats.avg_assists}, {stats.avg_cs_per_min} CS/min, best champion {best}, worst {worst}, "
                 f"{stats.high_death_games} games with 8+ deaths.")
