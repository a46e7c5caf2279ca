"""
Module commentary - Textes du bot.

- templates.py: messages de base, sans IA
- prompts.py: prompts envoyés au LLM
- generator.py: CommentaryGenerator (ollama, bascule de modèle)
"""
