import os


Version = '1.4.0'

api_key_lol = os.environ.get('API_LOL')
discord_token = os.environ.get('discord_tk')
url_bdd = os.environ.get('API_SQL')

# routing Riot : régional pour account/match-v5, plateforme pour spectator
region = os.environ.get('RIOT_REGION', 'europe').lower()
my_region = os.environ.get('RIOT_PLATFORM', 'euw1').lower()

ollama_host = os.environ.get('OLLAMA_HOST')
llm_models = [model.strip()
              for model in os.environ.get('LLM_MODELS', 'gpt-oss:20b,llama3.1:8b,mistral:7b,gemma2:9b').split(',')
              if model.strip()]

live_poll_seconds = float(os.environ.get('LIVE_POLL_SECONDS', 3))
live_status_seconds = float(os.environ.get('LIVE_STATUS_SECONDS', 15))
external_timeout = float(os.environ.get('EXTERNAL_TIMEOUT_SECONDS', 20))

match_history_count = int(os.environ.get('MATCH_HISTORY_COUNT', 10))
MAX_MATCH_COUNT = 100
