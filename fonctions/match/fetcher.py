"""
Accès uniforme aux données de match : partie en cours, historique, timeline.
"""

import aiohttp

from fonctions.errors import AccountNotFound, NotFound
from fonctions.match.models import LiveMatchState, MatchRecord, parse_live_match, parse_match_record
from fonctions.match.riot_api import (get_list_matchs_with_puuid,
                                      get_match_detail,
                                      get_match_timeline,
                                      get_spectator,
                                      get_summoner_by_riot_id,
                                      new_session)


class MatchFetcher:
    """Lie une session aiohttp aux appels de l'API Riot."""

    def __init__(self, session: aiohttp.ClientSession = None):
        self._session = session

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = new_session()
        return self._session

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def fetch_account(self, game_name: str, tag_line: str) -> dict:
        try:
            return await get_summoner_by_riot_id(self.session, game_name, tag_line)
        except NotFound as e:
            raise AccountNotFound(f'{game_name}#{tag_line}') from e

    async def fetch_live_match(self, puuid: str) -> LiveMatchState | None:
        """État courant de la partie du joueur, None s'il n'est pas en game."""
        payload = await get_spectator(self.session, puuid)
        if payload is None:
            return None
        return parse_live_match(payload)

    async def fetch_match_ids(self, puuid: str, count: int = 10) -> list[str]:
        return list(await get_list_matchs_with_puuid(self.session, puuid, count=count) or [])

    async def fetch_match(self, match_id: str) -> dict:
        return await get_match_detail(self.session, match_id)

    async def fetch_match_record(self, match_id: str, puuid: str) -> MatchRecord:
        return parse_match_record(await self.fetch_match(match_id), puuid)

    async def fetch_timeline(self, match_id: str) -> dict:
        return await get_match_timeline(self.session, match_id)
