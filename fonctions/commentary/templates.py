"""
Messages de base (sans IA) : toujours envoyés, l'IA ne fait qu'ajouter du piquant.
"""

from datetime import timedelta

import humanize

from fonctions.live.detection import EventKind, GameEvent
from fonctions.match.models import PlayerSnapshot


def event_message(event: GameEvent, state: PlayerSnapshot, champion_name: str = 'Champion') -> str:
    kda = f"K/D/A: {state.kda_str}"

    if event.kind == EventKind.KILL:
        title = 'KILL!' if event.count == 1 else f'{event.count}x KILLS'
        return (f"🔥 **{title}**\n\n"
                f"Got a kill with {champion_name}? Nice farm pick, probably against afk. 💀\n"
                f"{kda}")

    if event.kind == EventKind.MULTIKILL:
        return (f"🔥🔥🔥 **{event.count}x MULTIKILL!** 🔥🔥🔥\n\n"
                f"Okay fine, that was actually impressive! Don't let it go to your head.\n"
                f"{kda}")

    if event.kind == EventKind.DEATH:
        return (f"💀 **DEAD AGAIN!** 💀\n\n"
                f"That's {event.count} death(s). You're becoming cannon fodder.\n"
                f"{kda}\n"
                f"Gold: {state.gold}")

    if event.kind == EventKind.FEEDING:
        return (f"💀💀💀 **FEEDING DETECTED** 💀💀💀\n\n"
                f"{event.count} deaths already?! You're not a player, you're a liability!\n"
                f"{kda}")

    if event.kind == EventKind.GOLD_SWING:
        return (f"📉 **MASSIVE GOLD LOSS** 📉\n\n"
                f"Lost {event.amount} gold! The enemy is farming you. 🤡\n"
                f"Current Gold: {state.gold}")

    return f"Event: {event.kind.value}"


def with_flavor(base: str, flavor: str | None) -> str:
    if not flavor:
        return base
    return f"{base}\n\n🎙️ *{flavor.strip()}*"


def live_start_message(game_mode: str) -> str:
    return ("🎮 **LIVE MATCH TRACKING STARTED** 🎮\n\n"
            f"📊 Game Mode: {game_mode}\n"
            "🔄 Updates incoming... Get ready to get roasted! 🔥")


def live_status_message(state: PlayerSnapshot, next_update: int = 15) -> str:
    minutes, seconds = divmod(int(state.game_duration), 60)
    return ("⏱️ **Live Match Update**\n\n"
            f"📊 Game Time: {minutes}m {seconds}s\n"
            f"K/D/A: {state.kda_str}\n"
            f"💰 Gold: {state.gold}\n"
            f"🧿 CS: {state.cs}\n"
            f"⚡ Level: {state.level}\n"
            f"Team Score: {state.team_kills} vs {state.enemy_team_kills}\n\n"
            f"🔄 Next update in {next_update}s...")


def final_summary_message(state: PlayerSnapshot, tracked_seconds: float, nb_events: int) -> str:
    return ("🏁 **MATCH ENDED** 🏁\n\n"
            "Final Stats:\n"
            f"📊 K/D/A: {state.kda_str}\n"
            f"💰 Gold: {state.gold}\n"
            f"🧿 CS: {state.cs}\n"
            f"📣 {nb_events} event(s) roasted in {humanize.naturaldelta(timedelta(seconds=tracked_seconds))}\n\n"
            "GG! Use /roast to see the full breakdown.")


def match_overview_message(stats: dict, roast: str) -> str:
    return ("📊 MATCH ROAST:\n\n"
            f"🎯 Champion: {stats['championName']} (Lvl {stats['champLevel']})\n"
            f"📍 Role: {stats['role']}\n"
            f"⚔️ K/D/A: {stats['kills']}/{stats['deaths']}/{stats['assists']}\n"
            f"📈 KDA Ratio: {stats['kda']:.2f}\n"
            f"🧿 CS: {stats['totalMinionsKilled']}\n"
            f"💰 Gold: {stats['goldEarned']} ({stats['goldPerMinute']:.2f}/min)\n"
            f"⚡ Damage: {stats['totalDamageDealtToChampions']}\n"
            f"🛡️ Damage Taken: {stats['totalDamageTaken']}\n"
            f"👁️ Vision: {stats['visionScore']} | Wards: {stats['wardsPlaced']}\n"
            f"⚰️ Time dead: {stats['totalTimeSpentDead']}s ({stats['totalTimeSpentDead'] / 60:.1f}min)\n"
            f"{'✅ WIN' if stats['win'] else '❌ LOSS'}\n\n"
            f"🔥🔥🔥 OVERVIEW ROAST 🔥🔥🔥\n{roast}")
