"""
Erreurs du bot.

Les collaborateurs externes (API Riot, LLM, BDD) lèvent ces erreurs typées,
le tracker live et l'agrégateur les transforment en résultats à chaque
frontière de boucle.
"""


class RoastBotError(Exception):
    """Erreur de base."""


# =============================================================================
# NOT FOUND (jamais retenté automatiquement)
# =============================================================================

class NotFound(RoastBotError):
    """Ressource absente : pas de partie, pas de matchs, joueur absent..."""


class NoActiveMatch(NotFound):
    def __init__(self, puuid: str = ''):
        super().__init__('No active game found for this player')
        self.puuid = puuid


class NoMatchesFound(NotFound):
    def __init__(self, puuid: str = ''):
        super().__init__('No matches found')
        self.puuid = puuid


class PlayerNotInMatch(NotFound):
    def __init__(self, match_id: str = '', puuid: str = ''):
        super().__init__(f'Player not found in match {match_id}')
        self.match_id = match_id
        self.puuid = puuid


class AccountNotFound(NotFound):
    def __init__(self, riot_id: str = ''):
        super().__init__(f'Riot account {riot_id} not found')
        self.riot_id = riot_id


class UserNotRegistered(NotFound):
    def __init__(self, user_id=None):
        super().__init__("You haven't registered yet! Use /start first.")
        self.user_id = user_id


# =============================================================================
# FOURNISSEURS
# =============================================================================

class ProviderError(RoastBotError):
    """Réponse en erreur d'un fournisseur externe."""

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        self.status = status


class TransientProviderError(ProviderError):
    """Rate limit, timeout ou 5xx : on peut réessayer plus tard."""


class GenerationFailed(RoastBotError):
    """Tous les modèles de génération de texte ont échoué."""


class PersistenceError(RoastBotError):
    """Erreur d'écriture ou de lecture en BDD."""


class SessionAlreadyActive(RoastBotError):
    def __init__(self, user_id=None, match_id=None):
        super().__init__('A live session is already running for this user')
        self.user_id = user_id
        self.match_id = match_id
