"""Pokédex Search package public API.

Keep imports lightweight to avoid side effects when importing submodules,
e.g., pokedex_search.models.card.
"""

from typing import TYPE_CHECKING

__all__ = ["CardLookupClient"]

if TYPE_CHECKING:
	# For type checkers only; avoids runtime side effects
	from .tools.card_lookup import CardLookupClient as CardLookupClient


def __getattr__(name: str):
	if name == "CardLookupClient":
		# Lazy import keeps the HTTP stack out of plain model imports
		from .tools.card_lookup import CardLookupClient
		return CardLookupClient
	raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
