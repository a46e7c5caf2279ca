"""
Détection des événements d'une partie en cours par comparaison de deux
snapshots successifs du joueur.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fonctions.match.models import PlayerSnapshot


MULTIKILL_THRESHOLD = 3
FEEDING_THRESHOLD = 2
GOLD_SWING_THRESHOLD = -500
EARLY_GAME_SECONDS = 900  # 15 minutes


class EventKind(Enum):
    KILL = "kill"
    MULTIKILL = "multikill"
    DEATH = "death"
    FEEDING = "feeding"
    GOLD_SWING = "gold_swing"


@dataclass(frozen=True)
class GameEvent:
    """Événement détecté sur un tick. `value` = nombre de kills/morts ou or perdu."""
    kind: EventKind
    value: int

    @property
    def count(self) -> int:
        return self.value

    @property
    def amount(self) -> int:
        return self.value

    @classmethod
    def kill(cls, count: int) -> "GameEvent":
        return cls(EventKind.KILL, count)

    @classmethod
    def multikill(cls, count: int) -> "GameEvent":
        return cls(EventKind.MULTIKILL, count)

    @classmethod
    def death(cls, count: int) -> "GameEvent":
        return cls(EventKind.DEATH, count)

    @classmethod
    def feeding(cls, count: int) -> "GameEvent":
        return cls(EventKind.FEEDING, count)

    @classmethod
    def gold_swing(cls, amount: int) -> "GameEvent":
        return cls(EventKind.GOLD_SWING, amount)


def detect_events(previous: Optional[PlayerSnapshot], current: PlayerSnapshot) -> list[GameEvent]:
    """Compare deux snapshots et retourne les événements, dans l'ordre
    kills, puis morts, puis or. Au plus un événement par catégorie.

    Sans snapshot précédent (premier tick), rien n'est déduit.
    Le niveau, les CS et la vision ne déclenchent jamais d'événement.
    """
    if previous is None:
        return []

    events = []

    kill_delta = current.kills - previous.kills
    if kill_delta >= MULTIKILL_THRESHOLD:
        events.append(GameEvent.multikill(kill_delta))
    elif kill_delta >= 1:
        events.append(GameEvent.kill(kill_delta))

    death_delta = current.deaths - previous.deaths
    if death_delta >= FEEDING_THRESHOLD:
        events.append(GameEvent.feeding(death_delta))
    elif death_delta == 1:
        events.append(GameEvent.death(death_delta))

    # une baisse d'or seule est normale (achats), on ne signale que les grosses pertes en early
    gold_delta = current.gold - previous.gold
    if gold_delta < GOLD_SWING_THRESHOLD and current.game_duration < EARLY_GAME_SECONDS:
        events.append(GameEvent.gold_swing(abs(gold_delta)))

    return events
