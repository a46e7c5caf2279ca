"""
Appels à l'API Riot Games.
Gestion des requêtes vers les différents endpoints de l'API LoL et traduction
des erreurs HTTP en erreurs typées.
"""

import asyncio
import logging
from urllib.parse import quote

import aiohttp

from fonctions.errors import NotFound, ProviderError, TransientProviderError
from utils.params import api_key_lol, region, my_region, external_timeout, MAX_MATCH_COUNT

log = logging.getLogger(__name__)


def new_session(timeout: float = external_timeout) -> aiohttp.ClientSession:
    """Session aiohttp avec timeout borné et clé API en header."""
    return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout),
                                 headers={'X-Riot-Token': api_key_lol or ''})


async def riot_get(session: aiohttp.ClientSession, url: str, params: dict = None, allow_404: bool = False):
    """GET sur l'API Riot.

    404 -> None si `allow_404`, sinon NotFound.
    429 / 5xx / timeout / erreur réseau -> TransientProviderError.
    Autres codes d'erreur -> ProviderError.
    """
    try:
        async with session.get(url, params=params) as response:
            if response.status == 404:
                if allow_404:
                    return None
                raise NotFound(f'Riot API 404 for {url}')

            if response.status == 429 or response.status >= 500:
                log.warning(f'[Riot] {response.status} {response.reason} pour {url}')
                raise TransientProviderError(f'Riot API {response.status} for {url}', status=response.status)

            if response.status != 200:
                try:
                    err = await response.json()
                except (aiohttp.ContentTypeError, ValueError):
                    err = {'raw': await response.text()}
                raise ProviderError(f'Riot API {response.status} for {url} -> {err}', status=response.status)

            return await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransientProviderError(f'Riot API unreachable for {url} : {e!r}') from e


# ============================================================================
# DONNÉES JOUEUR
# ============================================================================

async def get_summoner_by_riot_id(session: aiohttp.ClientSession, riot_id, riot_tag):
    """Récupère les informations d'un joueur par son Riot ID."""
    return await riot_get(
        session,
        f'https://{region}.api.riotgames.com/riot/account/v1/accounts/by-riot-id/{quote(riot_id)}/{quote(riot_tag)}')


# ============================================================================
# MATCHS
# ============================================================================

async def get_list_matchs_with_puuid(session: aiohttp.ClientSession, puuid, count: int = 20, start: int = 0, queue=None):
    """Récupère la liste des matchs par PUUID (le plus récent en premier)."""
    params = {'start': start, 'count': max(1, min(int(count), MAX_MATCH_COUNT))}
    if queue is not None:
        params['queue'] = queue

    return await riot_get(session,
                          f'https://{region}.api.riotgames.com/lol/match/v5/matches/by-puuid/{puuid}/ids',
                          params=params)


async def get_match_detail(session: aiohttp.ClientSession, match_id):
    """Récupère les détails d'un match."""
    return await riot_get(session, f'https://{region}.api.riotgames.com/lol/match/v5/matches/{match_id}')


async def get_match_timeline(session: aiohttp.ClientSession, match_id):
    """Récupère la timeline d'un match."""
    return await riot_get(session, f'https://{region}.api.riotgames.com/lol/match/v5/matches/{match_id}/timeline')


# ============================================================================
# SPECTATEUR
# ============================================================================

async def get_spectator(session, puuid):
    """Récupère les données d'une partie en cours. None si le joueur n'est pas en game."""
    return await riot_get(
        session,
        f'https://{my_region}.api.riotgames.com/lol/spectator/v5/active-games/by-summoner/{puuid}',
        allow_404=True)
