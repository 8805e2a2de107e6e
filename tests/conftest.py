"""
Pytest configuration and shared fixtures.
"""
import json
import pytest
import requests
from unittest.mock import Mock
from typing import Any, Dict, List

from pokedex_search.models.card import PokemonCard
from pokedex_search.models.search import SearchQuery
from pokedex_search.events import SearchEventEmitter


# ==================== RESPONSE HELPERS ====================

def build_response(body: Any, status_code: int = 200, url: str = "") -> requests.Response:
    """Build a real requests.Response carrying the given body.

    Dicts and lists are serialised to JSON; strings are sent as-is so that
    invalid bodies raise genuine decode errors.
    """
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = body.encode("utf-8")
    return response


@pytest.fixture
def make_response():
    """Factory fixture for canned API responses."""
    return build_response


# ==================== CARD FIXTURES ====================

@pytest.fixture
def sample_card_data():
    """Sample card record - matches the Pokémon TCG API v1 format."""
    return {
        "id": "base5-20",
        "name": "Dark Blastoise",
        "nationalPokedexNumber": 9,
        "imageUrl": "https://images.pokemontcg.io/base5/20.png",
        "imageUrlHiRes": "https://images.pokemontcg.io/base5/20_hires.png",
        "types": ["Water"],
        "supertype": "Pokémon",
        "subtype": "Stage 2",
        "evolvesFrom": "Dark Wartortle",
        "hp": "70",
        "retreatCost": ["Colorless", "Colorless"],
        "number": "20",
        "artist": "Ken Sugimori",
        "rarity": "Rare Holo",
        "series": "Base",
        "set": "Team Rocket",
        "setCode": "base5",
        "weaknesses": [
            {"type": "Lightning", "value": "×2"}
        ]
    }


@pytest.fixture
def sample_card(sample_card_data):
    """Sample PokemonCard model instance."""
    return PokemonCard.from_api(sample_card_data)


@pytest.fixture
def make_card_data(sample_card_data):
    """Factory for card records derived from the sample card."""
    def _make(**overrides) -> Dict[str, Any]:
        data = dict(sample_card_data)
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def cards_response(make_card_data):
    """Search response body holding three cards."""
    return {
        "cards": [
            make_card_data(id="some-id-1"),
            make_card_data(id="some-id-2", name="Blastoise", hp="100"),
            make_card_data(id="some-id-3", name="Wartortle", hp="70", nationalPokedexNumber="8"),
        ]
    }


@pytest.fixture
def types_response():
    """Types response body."""
    return {
        "types": [
            "Colorless", "Darkness", "Dragon", "Fairy", "Fighting",
            "Fire", "Grass", "Lightning", "Metal", "Psychic", "Water"
        ]
    }


# ==================== SEARCH FIXTURES ====================

@pytest.fixture
def sample_search_query():
    """Sample SearchQuery model instance."""
    return SearchQuery(name="charmander")


@pytest.fixture
def typed_search_query():
    """SearchQuery restricted to two types."""
    return SearchQuery(name="bulbasaur", types=["Grass", "Fairy"], limit=5)


# ==================== EVENT FIXTURES ====================

@pytest.fixture
def mock_event_emitter():
    """Mock event emitter for testing event emission."""
    emitter = Mock(spec=SearchEventEmitter)
    emitter.emit = Mock()
    return emitter


@pytest.fixture
def event_recorder():
    """Real emitter that records every event type and payload it emits."""
    emitter = SearchEventEmitter()
    received: List[tuple] = []

    for event_type in [
        "card_search_started", "cache_hit", "cards_fetched",
        "cache_reset", "types_fetched", "error_occurred"
    ]:
        emitter.on(event_type, lambda data, event_type=event_type: received.append((event_type, data)))

    emitter.received = received
    return emitter


# ==================== CONFIG FIXTURES ====================

@pytest.fixture
def reset_config_module():
    """Reset config module state between tests."""
    import importlib
    import pokedex_search.config as config

    yield

    importlib.reload(config)
