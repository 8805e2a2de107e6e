import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE_URL = "https://api.pokemontcg.io/v1"
SEARCH_PATH = "/cards"
TYPES_PATH = "/types"
DEFAULT_LIMIT = 10  # pageSize sent with every search
SUPERTYPE = "Pokémon"  # trainer and energy cards are never requested
USER_AGENT = "PokedexSearch/1.0"

# CLI defaults, the client itself is configured through its constructor
CLI_API_BASE_URL = os.getenv("POKEDEX_API_BASE_URL") or DEFAULT_API_BASE_URL
CLI_CACHE_RESULTS = os.getenv("POKEDEX_CACHE_RESULTS", "true").strip().lower() not in ("false", "0", "no")
