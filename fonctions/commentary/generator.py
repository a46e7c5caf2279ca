"""
Génération de texte via ollama, avec bascule sur un modèle de secours.
"""

import asyncio
import logging

from ollama import AsyncClient, ResponseError

from fonctions.errors import GenerationFailed
from fonctions.commentary import prompts
from utils.params import llm_models, ollama_host, external_timeout

log = logging.getLogger(__name__)

# temps laissé au-delà des deux essais (bascule, logs)
MARGE_BASCULE = 1.0


def is_fallback_error(error: Exception) -> bool:
    """Rate limit, quota, modèle indisponible ou timeout : on tente un autre modèle."""
    if isinstance(error, asyncio.TimeoutError):
        return True
    if isinstance(error, ResponseError):
        message = str(error.error).lower()
        return (error.status_code in (404, 429, 503)
                or 'rate limit' in message
                or 'quota' in message
                or 'model' in message
                or 'not found' in message)
    return False


class CommentaryGenerator:
    """Transforme un événement ou un résumé en une phrase de roast.

    Le modèle courant est partagé entre les appels : après une bascule, les
    appels suivants partent du modèle de secours.
    """

    def __init__(self, client: AsyncClient = None, models: list[str] = None, timeout: float = external_timeout):
        self.client = client or AsyncClient(host=ollama_host)
        self.models = list(models or llm_models)
        if not self.models:
            raise ValueError('At least one model is required')
        self.timeout = timeout
        self._index = 0

    @property
    def current_model(self) -> str:
        return self.models[self._index]

    @property
    def max_duration(self) -> float:
        """Borne d'un appel complet : essai sur le modèle courant puis essai de secours."""
        return 2 * self.timeout + MARGE_BASCULE

    def switch_model(self) -> str:
        self._index = (self._index + 1) % len(self.models)
        log.warning(f'[LLM] Bascule sur le modèle {self.current_model}')
        return self.current_model

    async def _chat(self, model: str, messages: list[dict], max_tokens: int) -> str:
        response = await asyncio.wait_for(
            self.client.chat(model=model, messages=messages, options={'num_predict': max_tokens}),
            timeout=self.timeout)
        return response['message']['content'].strip()

    async def complete(self, messages: list[dict], max_tokens: int = 200) -> str:
        """Un essai sur le modèle courant, un seul essai de secours sur le suivant."""
        model = self.current_model
        try:
            return await self._chat(model, messages, max_tokens)
        except (ResponseError, asyncio.TimeoutError, ConnectionError) as e:
            if not is_fallback_error(e):
                raise GenerationFailed(f'{model} : {e!r}') from e
            log.warning(f'[LLM] Erreur sur {model} : {e!r}')

            next_model = self.switch_model()
            if next_model == model:
                raise GenerationFailed(f'{model} : {e!r}') from e

            try:
                return await self._chat(next_model, messages, max_tokens)
            except (ResponseError, asyncio.TimeoutError, ConnectionError) as fallback_error:
                log.error(f'[LLM] Le modèle de secours {next_model} a aussi échoué : {fallback_error!r}')
                raise GenerationFailed(f'{next_model} : {fallback_error!r}') from fallback_error

    # =========================================================================
    # ROASTS
    # =========================================================================

    async def roast_player_name(self, game_name: str, tag_line: str) -> str:
        return await self.complete(prompts.name_roast_prompt(game_name, tag_line), 200)

    async def roast_match_performance(self, stats: dict) -> str:
        return await self.complete(prompts.match_roast_prompt(stats), 400)

    async def roast_timeline(self, stats: dict, timeline: dict) -> str:
        return await self.complete(prompts.timeline_roast_prompt(stats, timeline), 500)

    async def roast_live_event(self, event, state, champion_name: str) -> str:
        return await self.complete(prompts.live_event_prompt(event, state, champion_name), 120)

    async def roast_stats_summary(self, stats) -> str:
        return await self.complete(prompts.stats_summary_prompt(stats), 150)
