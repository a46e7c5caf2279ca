"""
Module live - Suivi des parties en cours.

- detection.py: événements (kill, mort, multikill, feed, perte d'or) entre deux snapshots
- session.py: LiveSession, état d'un suivi
- tracker.py: SessionTracker, registre des sessions et boucle de polling

Les sous-modules s'importent directement (tracker dépend de fonctions.commentary,
qui dépend lui-même de detection).
"""
