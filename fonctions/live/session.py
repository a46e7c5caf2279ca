import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from fonctions.live.detection import GameEvent
from fonctions.match.models import PlayerSnapshot


class SessionState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    ENDED = "ended"


@dataclass
class LiveSession:
    """Suivi d'une partie en cours pour un utilisateur (session_id = id utilisateur)."""
    session_id: str
    match_id: str
    channel_id: int
    puuid: str
    champion_name: str = 'Champion'
    game_mode: str = 'UNKNOWN'
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    started_clock: float = 0.0
    last_snapshot: Optional[PlayerSnapshot] = None
    last_status_emit_at: float = 0.0
    emitted_event_count: int = 0
    events: list[GameEvent] = field(default_factory=list)
    state: SessionState = SessionState.IDLE
    message_id: Optional[str] = None
    task: Optional[asyncio.Task] = field(default=None, repr=False)
    tick_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def active(self) -> bool:
        return self.state == SessionState.TRACKING

    def record(self, event: GameEvent):
        self.events.append(event)
        self.emitted_event_count += 1

    def checkpoint(self) -> dict:
        """État persisté en BDD."""
        return {
            'match_id': self.match_id,
            'channel_id': self.channel_id,
            'puuid': self.puuid,
            'message_id': self.message_id,
            'started_at': self.started_at.isoformat(),
            'emitted_events': self.emitted_event_count,
        }
