"""
Suivi des parties en cours : une boucle de polling par session, détection des
événements entre deux snapshots et commentaire de chaque événement.

Cycle de vie d'une session : IDLE -> TRACKING -> ENDED.
Un utilisateur a au plus une session active ; un second /live est refusé.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

from fonctions.commentary.templates import (event_message,
                                            final_summary_message,
                                            live_start_message,
                                            live_status_message,
                                            with_flavor)
from fonctions.errors import (GenerationFailed,
                              NoActiveMatch,
                              PersistenceError,
                              ProviderError,
                              SessionAlreadyActive,
                              TransientProviderError)
from fonctions.live.detection import GameEvent, detect_events
from fonctions.live.session import LiveSession, SessionState
from fonctions.match.models import LiveMatchState, PlayerSnapshot
from utils.params import live_poll_seconds, live_status_seconds, external_timeout

log = logging.getLogger(__name__)

SendCallable = Callable[[int, str], Awaitable[object]]


class SessionTracker:
    """Registre des sessions live, possédé par une seule instance.

    Parameters
    ----------
    fetcher :
        fournit `fetch_live_match(puuid)` (None si pas de partie)
    commentary :
        fournit `roast_live_event(event, state, champion)` ; None = pas d'IA,
        `max_duration` optionnel (sinon `timeout`)
    store :
        `save_live_session`, `end_live_session`, `get_active_live_sessions` (synchrones)
    send : `coroutine(channel_id, text)`
        transport vers le chat
    """

    def __init__(self,
                 fetcher,
                 commentary,
                 store,
                 send: SendCallable,
                 *,
                 poll_interval: float = live_poll_seconds,
                 status_interval: float = live_status_seconds,
                 timeout: float = external_timeout,
                 clock: Callable[[], float] = time.monotonic):
        self.fetcher = fetcher
        self.commentary = commentary
        self.store = store
        self.send = send
        self.poll_interval = poll_interval
        self.status_interval = status_interval
        self.timeout = timeout
        self.clock = clock

        self._sessions: dict[str, LiveSession] = {}
        self._starting: set[str] = set()

    # =========================================================================
    # REGISTRE
    # =========================================================================

    def get(self, user_id) -> Optional[LiveSession]:
        return self._sessions.get(str(user_id))

    def is_tracking(self, user_id) -> bool:
        return str(user_id) in self._sessions

    def active_sessions(self) -> list[dict]:
        now = self.clock()
        return [{'user_id': user_id,
                 'match_id': session.match_id,
                 'duration': now - session.started_clock,
                 'events': session.emitted_event_count}
                for user_id, session in list(self._sessions.items())]

    # =========================================================================
    # DÉMARRAGE / ARRÊT
    # =========================================================================

    async def start(self, user_id, puuid: str, channel_id: int) -> LiveSession:
        """Démarre le suivi de la partie en cours du joueur.

        Raises
        ------
        SessionAlreadyActive
            une session tourne déjà (ou démarre) pour cet utilisateur
        NoActiveMatch
            le joueur n'est pas en partie
        TransientProviderError
            l'API Riot n'a pas répondu
        """
        key = str(user_id)
        if key in self._sessions or key in self._starting:
            current = self._sessions.get(key)
            raise SessionAlreadyActive(key, current.match_id if current else None)

        self._starting.add(key)
        try:
            state = await self._fetch_live(puuid)
            if state is None:
                raise NoActiveMatch(puuid)

            now = self.clock()
            session = LiveSession(session_id=key,
                                  match_id=state.match_id,
                                  channel_id=channel_id,
                                  puuid=puuid,
                                  champion_name=state.champion_for(puuid),
                                  game_mode=state.game_mode,
                                  started_clock=now,
                                  last_status_emit_at=now,
                                  state=SessionState.TRACKING)
            self._sessions[key] = session
        finally:
            self._starting.discard(key)

        message = await self._deliver(session, live_start_message(session.game_mode))
        if message is not None and getattr(message, 'id', None) is not None:
            session.message_id = str(message.id)

        await self._persist(self.store.save_live_session, key, session.checkpoint())

        session.task = asyncio.create_task(self._poll_loop(session), name=f'live-{key}')
        log.info(f'[Live] Suivi démarré pour {key} - match {session.match_id}')
        return session

    async def stop(self, user_id, announce: bool = True) -> bool:
        """Arrête la session de l'utilisateur. Sans session active : ne fait rien.

        Au retour, plus aucun tick de cette session ne peut s'exécuter.
        """
        session = self._sessions.pop(str(user_id), None)
        if session is None:
            return False

        await self._cancel_polling(session)
        await self._finish(session, announce=announce)
        return True

    async def stop_all(self):
        """Arrêt de toutes les sessions (extinction du bot), au mieux."""
        for user_id in list(self._sessions):
            try:
                await asyncio.wait_for(self.stop(user_id, announce=False), timeout=self.timeout)
            except Exception:
                log.exception(f'[Live] Arrêt impossible pour {user_id}')

    async def retire_orphans(self) -> int:
        """Clôt en BDD les sessions restées actives d'un précédent démarrage."""
        try:
            rows = await asyncio.wait_for(asyncio.to_thread(self.store.get_active_live_sessions), self.timeout)
        except (PersistenceError, asyncio.TimeoutError) as e:
            log.error(f'[Live] Lecture des sessions orphelines impossible : {e!r}')
            return 0

        nb_retired = 0
        for row in rows:
            user_id = str(row['discord_id'])
            if user_id in self._sessions:
                continue
            if await self._persist(self.store.end_live_session, user_id, None):
                nb_retired += 1
        if nb_retired:
            log.info(f'[Live] {nb_retired} session(s) orpheline(s) clôturée(s)')
        return nb_retired

    # =========================================================================
    # POLLING
    # =========================================================================

    async def poll_once(self, user_id) -> bool:
        """Exécute un tick pour la session. False si la session n'est plus suivie."""
        session = self.get(user_id)
        if session is None:
            return False
        return await self._tick(session)

    async def _poll_loop(self, session: LiveSession):
        while session.active:
            await asyncio.sleep(self.poll_interval)
            if not session.active:
                break
            try:
                still_tracking = await self._tick(session)
            except asyncio.CancelledError:
                raise
            except Exception:
                log.exception(f'[Live] Erreur pendant le tick de {session.session_id}')
                continue
            if not still_tracking:
                break

    async def _tick(self, session: LiveSession) -> bool:
        async with session.tick_lock:
            if not session.active:
                return False

            try:
                state = await self._fetch_live(session.puuid)
            except ProviderError as e:
                # on retente au prochain tick, sans arrêter la session
                log.warning(f'[Live] Récupération impossible pour {session.session_id} : {e}')
                return True

            if state is None or state.match_id != session.match_id:
                self._remove(session)
                await self._finish(session, announce=True)
                return False

            current = state.snapshot_for(session.puuid)
            events = detect_events(session.last_snapshot, current)
            session.last_snapshot = current

            for event in events:
                text = await self._event_text(event, current, session.champion_name)
                session.record(event)
                await self._deliver(session, text)

            now = self.clock()
            if now - session.last_status_emit_at >= self.status_interval:
                session.last_status_emit_at = now
                await self._deliver(session, live_status_message(current, int(self.status_interval)))

            return True

    # =========================================================================
    # OUTILS
    # =========================================================================

    async def _fetch_live(self, puuid: str) -> Optional[LiveMatchState]:
        try:
            return await asyncio.wait_for(self.fetcher.fetch_live_match(puuid), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise TransientProviderError(f'Live match fetch timed out for {puuid}') from e

    async def _event_text(self, event: GameEvent, state: PlayerSnapshot, champion_name: str) -> str:
        base = event_message(event, state, champion_name)
        if self.commentary is None:
            return base
        # le générateur borne chaque essai lui-même : on lui laisse le temps de basculer
        limite = getattr(self.commentary, 'max_duration', self.timeout)
        try:
            flavor = await asyncio.wait_for(self.commentary.roast_live_event(event, state, champion_name),
                                            timeout=limite)
        except (GenerationFailed, asyncio.TimeoutError) as e:
            log.warning(f'[Live] Pas de commentaire IA pour {event.kind.value} : {e!r}')
            return base
        except Exception:
            log.exception(f'[Live] Erreur inattendue du générateur pour {event.kind.value}')
            return base
        return with_flavor(base, flavor)

    async def _deliver(self, session: LiveSession, text: str):
        """Envoi unique, sans attendre de confirmation au-delà d'une tentative."""
        try:
            return await asyncio.wait_for(self.send(session.channel_id, text), timeout=self.timeout)
        except Exception as e:
            log.error(f'[Live] Envoi impossible pour {session.session_id} : {e!r}')
            return None

    async def _persist(self, func, *args) -> bool:
        try:
            await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self.timeout)
            return True
        except (PersistenceError, asyncio.TimeoutError) as e:
            log.error(f'[Live] Persistance impossible ({getattr(func, "__name__", func)}) : {e!r}')
            return False

    def _remove(self, session: LiveSession):
        if self._sessions.get(session.session_id) is session:
            del self._sessions[session.session_id]

    async def _cancel_polling(self, session: LiveSession):
        task = session.task
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            log.exception(f'[Live] La boucle de {session.session_id} a échoué')

    async def _finish(self, session: LiveSession, announce: bool):
        """Passage en ENDED : résumé final éventuel puis fin persistée. Ne lève pas."""
        if session.state == SessionState.ENDED:
            return
        session.state = SessionState.ENDED
        session.task = None

        if announce and session.last_snapshot is not None:
            tracked = self.clock() - session.started_clock
            await self._deliver(session,
                                final_summary_message(session.last_snapshot, tracked, session.emitted_event_count))

        await self._persist(self.store.end_live_session, session.session_id, session.emitted_event_count)
        log.info(f'[Live] Suivi arrêté pour {session.session_id}')
