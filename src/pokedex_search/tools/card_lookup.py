import asyncio
import requests
from typing import Dict, Any, List, Optional
from ..models.card import PokemonCard
from ..models.search import SearchQuery
from ..config import DEFAULT_API_BASE_URL, SEARCH_PATH, TYPES_PATH, SUPERTYPE, USER_AGENT
from ..events import (
    SearchEventEmitter,
    CardSearchStartedEvent, CacheHitEvent, CardsFetchedEvent,
    CacheResetEvent, TypesFetchedEvent, ErrorOccurredEvent
)


class InvalidResponseBodyError(ValueError):
    """Raised when the API answers with a body that is not the expected JSON"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"invalid json response body at {url} reason: {reason}")
        self.url = url
        self.reason = reason


def _build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({
        'User-Agent': USER_AGENT,
        'Accept': 'application/json'
    })
    return session


def _decode(response: requests.Response, url: str, field: str) -> Any:
    """Parse a JSON body and pull out its top-level field"""
    try:
        data = response.json()
    except ValueError as e:
        raise InvalidResponseBodyError(url, str(e)) from e

    if not isinstance(data, dict) or field not in data:
        raise InvalidResponseBodyError(url, f"missing '{field}' field")
    return data[field]


class CardLookupClient:
    """Client for the Pokémon TCG API with an in-memory search cache

    Searches are cached in two levels: ``query_index`` maps a canonical
    query string to the ids it returned, ``card_by_id`` maps an id to its
    normalized card. A cached query is answered without any request.
    Nothing is ever evicted; ``reset_cache`` forgets the query index only.
    """

    def __init__(
        self,
        cache_results: bool = True,
        base_url: str = DEFAULT_API_BASE_URL,
        event_emitter: Optional[SearchEventEmitter] = None,
        session: Optional[requests.Session] = None,
    ):
        self._cache_results = cache_results
        self._base_url = base_url
        self.session = session or _build_session()
        self.events = event_emitter
        self.query_index: Dict[str, List[str]] = {}
        self.card_by_id: Dict[str, PokemonCard] = {}

    @property
    def cache_results(self) -> bool:
        return self._cache_results

    @property
    def base_url(self) -> str:
        return self._base_url

    @classmethod
    async def list_types(
        cls,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        event_emitter: Optional[SearchEventEmitter] = None,
    ) -> List[str]:
        """
        Fetch the Pokémon types known to the API

        Args:
            base_url: Override for the API root, defaults to DEFAULT_API_BASE_URL
            session: Session to send the request with, a fresh one when omitted
            event_emitter: Optional emitter notified of the outcome

        Returns:
            The type names in the order the API lists them
        """
        base_url = base_url or DEFAULT_API_BASE_URL
        url = f"{base_url}{TYPES_PATH}"
        session = session or _build_session()

        try:
            response = await asyncio.to_thread(session.get, url)
            types = _decode(response, url, "types")
        except (requests.exceptions.RequestException, InvalidResponseBodyError) as e:
            if event_emitter:
                event_emitter.emit(ErrorOccurredEvent(type(e).__name__, str(e), {"url": url}))
            raise

        if event_emitter:
            event_emitter.emit(TypesFetchedEvent(base_url, len(types)))
        return types

    @staticmethod
    def build_query_string(query: SearchQuery) -> str:
        """
        Build the canonical query string for a search

        The result is both the request's query string and the key of
        ``query_index``, so parameters are always emitted in the same order.
        """
        parts = [
            f"name={query.name}",
            f"pageSize={query.limit}",
            f"supertype={SUPERTYPE}",
        ]
        if query.types:
            parts.append(f"types={'|'.join(query.types)}")
        return "&".join(parts)

    def map_api_card(self, card: Dict[str, Any]) -> PokemonCard:
        return PokemonCard.from_api(card)

    async def search(self, query: SearchQuery) -> List[PokemonCard]:
        """
        Search for Pokémon cards, answering from the cache when possible

        Args:
            query: The search to run

        Returns:
            Normalized cards in the order the API returned them
        """
        key = self.build_query_string(query)

        if self._cache_results and key in self.query_index:
            cards = [self.card_by_id[card_id] for card_id in self.query_index[key]]
            self._emit(CacheHitEvent(key, len(cards)))
            return cards

        self._emit(CardSearchStartedEvent(key))
        url = f"{self._base_url}{SEARCH_PATH}?{key}"

        try:
            response = await asyncio.to_thread(self.session.get, url)
            raw_cards = _decode(response, url, "cards")
        except (requests.exceptions.RequestException, InvalidResponseBodyError) as e:
            self._emit(ErrorOccurredEvent(type(e).__name__, str(e), {"url": url, "query": key}))
            raise

        cards = []
        for raw_card in raw_cards:
            card = self.map_api_card(raw_card)
            self.card_by_id[card.api_id] = card
            cards.append(card)

        if self._cache_results:
            self.query_index[key] = [card.api_id for card in cards]

        self._emit(CardsFetchedEvent(key, len(cards), self._cache_results))
        return cards

    def reset_cache(self) -> None:
        """Forget every cached query, cards stay in ``card_by_id``"""
        cleared = len(self.query_index)
        self.query_index = {}
        self._emit(CacheResetEvent(cleared))

    def cache_stats(self) -> Dict[str, Any]:
        return {
            "enabled": self._cache_results,
            "cached_queries": len(self.query_index),
            "cached_cards": len(self.card_by_id),
        }

    def _emit(self, event) -> None:
        if self.events:
            self.events.emit(event)
