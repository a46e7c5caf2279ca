import json
from datetime import datetime, timezone

import pandas as pd
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
import logging

from fonctions.errors import PersistenceError, UserNotRegistered
from utils.params import url_bdd

log = logging.getLogger(__name__)

_engine = None


def configure_engine(url: str = None, **kwargs):
    """(Re)crée l'engine SQLAlchemy. Sans url, on lit API_SQL."""
    global _engine
    url = url or url_bdd
    if url is None:
        raise PersistenceError('API_SQL is not set')
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, echo=False, **kwargs)
    return _engine


def get_engine():
    if _engine is None:
        return configure_engine()
    return _engine


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# REQUÊTES GÉNÉRIQUES
# =============================================================================

def lire_bdd_perso(requests: str,
                   format: str = "df",
                   index_col: str = "index",
                   params=None):
    """Lire la BDD

    Parameters
    -----------
    requests: :class:`str`
            Requête SQL avec obligatoirement SELECT (columns) from (table) et éventuellement WHERE
    format: :class:`str`
            Choix entre 'dict' ou 'df'
    index_col: :class:`str`
            Colonne de l'index de la table
    params : dict avec {'variable' : 'value'}


    Les variables doivent être sous forme :variable
    """
    try:
        conn = get_engine().connect()
        try:
            df = pd.read_sql(text(requests), con=conn, index_col=index_col, params=params)
        finally:
            conn.close()
    except SQLAlchemyError as e:
        log.error(f'[BDD] Lecture impossible : {e}')
        raise PersistenceError(str(e)) from e

    df = df.transpose()
    if format == "dict":
        df = df.to_dict()
    return df


def requete_perso_bdd(request: str,
                      dict_params: dict = None,
                      get_row_affected: bool = False):
    """
    request : requête sql au format text

    dict_params : dictionnaire {variable : valeur}

    Rappel
    -------
    Dans la requête sql, une variable = :variable """
    try:
        conn = get_engine().connect()
        try:
            cursor = conn.execute(text(request), dict_params or {})
            nb_row_affected = cursor.rowcount
            conn.commit()
        finally:
            conn.close()
    except SQLAlchemyError as e:
        log.error(f'[BDD] Requête impossible : {e}')
        raise PersistenceError(str(e)) from e

    if get_row_affected:
        return nb_row_affected


def init_tables():
    """Crée les tables du bot si elles n'existent pas."""
    requete_perso_bdd('''CREATE TABLE IF NOT EXISTS users (
                            discord_id TEXT PRIMARY KEY,
                            puuid TEXT NOT NULL,
                            riot_id TEXT,
                            riot_tagline TEXT,
                            last_match TEXT,
                            last_stats TEXT,
                            last_roast_time TEXT,
                            created_at TEXT,
                            updated_at TEXT)''')
    requete_perso_bdd('''CREATE TABLE IF NOT EXISTS live_sessions (
                            discord_id TEXT PRIMARY KEY,
                            match_id TEXT,
                            channel_id TEXT,
                            puuid TEXT,
                            message_id TEXT,
                            started_at TEXT,
                            ended_at TEXT,
                            active BOOLEAN NOT NULL DEFAULT TRUE,
                            emitted_events INTEGER NOT NULL DEFAULT 0)''')


def preparer_tables() -> bool:
    """init_tables au démarrage : sans BDD, le bot démarre quand même."""
    try:
        init_tables()
    except PersistenceError as e:
        log.error(f'[BDD] Tables non initialisées, le bot démarre sans persistance : {e}')
        return False
    return True


# =============================================================================
# UTILISATEURS
# =============================================================================

def find_user(discord_id):
    """Retourne le compte enregistré de l'utilisateur, ou None."""
    data = lire_bdd_perso('SELECT * FROM users WHERE discord_id = :discord_id',
                          format='dict',
                          index_col='discord_id',
                          params={'discord_id': str(discord_id)})
    user = data.get(str(discord_id))
    if user is None:
        return None
    user['discord_id'] = str(discord_id)
    if isinstance(user.get('last_stats'), str):
        user['last_stats'] = json.loads(user['last_stats'])
    return user


def get_registered_user(discord_id):
    """Comme find_user, mais lève UserNotRegistered sans compte."""
    user = find_user(discord_id)
    if user is None:
        raise UserNotRegistered(discord_id)
    return user


def save_user(discord_id, puuid: str, riot_id: str, riot_tagline: str):
    requete_perso_bdd('''INSERT INTO users (discord_id, puuid, riot_id, riot_tagline, created_at, updated_at)
                         VALUES (:discord_id, :puuid, :riot_id, :riot_tagline, :now, :now)
                         ON CONFLICT (discord_id)
                         DO UPDATE SET puuid = :puuid, riot_id = :riot_id, riot_tagline = :riot_tagline, updated_at = :now''',
                      {'discord_id': str(discord_id),
                       'puuid': puuid,
                       'riot_id': riot_id,
                       'riot_tagline': riot_tagline,
                       'now': now_iso()})


def update_user_stats(discord_id, last_match: str, last_stats: dict):
    return requete_perso_bdd('''UPDATE users SET last_match = :last_match, last_stats = :last_stats,
                                last_roast_time = :now, updated_at = :now
                                WHERE discord_id = :discord_id''',
                             {'discord_id': str(discord_id),
                              'last_match': last_match,
                              'last_stats': json.dumps(last_stats),
                              'now': now_iso()},
                             get_row_affected=True)


# =============================================================================
# SESSIONS LIVE
# =============================================================================

def save_live_session(discord_id, session_data: dict):
    """Checkpoint d'une session live (upsert, la session redevient active)."""
    requete_perso_bdd('''INSERT INTO live_sessions (discord_id, match_id, channel_id, puuid, message_id,
                                                    started_at, ended_at, active, emitted_events)
                         VALUES (:discord_id, :match_id, :channel_id, :puuid, :message_id,
                                 :started_at, NULL, TRUE, :emitted_events)
                         ON CONFLICT (discord_id)
                         DO UPDATE SET match_id = :match_id, channel_id = :channel_id, puuid = :puuid,
                                       message_id = :message_id, started_at = :started_at,
                                       ended_at = NULL, active = TRUE, emitted_events = :emitted_events''',
                      {'discord_id': str(discord_id),
                       'match_id': str(session_data.get('match_id')),
                       'channel_id': str(session_data.get('channel_id')),
                       'puuid': session_data.get('puuid'),
                       'message_id': session_data.get('message_id'),
                       'started_at': session_data.get('started_at') or now_iso(),
                       'emitted_events': int(session_data.get('emitted_events', 0))})


def end_live_session(discord_id, emitted_events: int = None):
    params = {'discord_id': str(discord_id), 'now': now_iso()}
    if emitted_events is None:
        request = '''UPDATE live_sessions SET ended_at = :now, active = FALSE
                     WHERE discord_id = :discord_id'''
    else:
        request = '''UPDATE live_sessions SET ended_at = :now, active = FALSE, emitted_events = :emitted_events
                     WHERE discord_id = :discord_id'''
        params['emitted_events'] = int(emitted_events)
    return requete_perso_bdd(request, params, get_row_affected=True)


def find_live_session(discord_id):
    data = lire_bdd_perso('SELECT * FROM live_sessions WHERE discord_id = :discord_id',
                          format='dict',
                          index_col='discord_id',
                          params={'discord_id': str(discord_id)})
    return data.get(str(discord_id))


def get_active_live_sessions() -> list:
    data = lire_bdd_perso('SELECT * FROM live_sessions WHERE ended_at IS NULL',
                          format='dict',
                          index_col=None)
    return list(data.values())


class BddStore:
    """Stockage clé-valeur des sessions live, utilisé par le tracker."""

    def save_live_session(self, session_id, state: dict):
        save_live_session(session_id, state)

    def end_live_session(self, session_id, emitted_events: int = None):
        end_live_session(session_id, emitted_events)

    def find_live_session(self, session_id):
        return find_live_session(session_id)

    def get_active_live_sessions(self) -> list:
        return get_active_live_sessions()
