from typing import List
from pydantic import BaseModel, Field
from ..config import DEFAULT_LIMIT


class SearchQuery(BaseModel):
    """Represents a card search against the Pokémon TCG API"""
    name: str
    types: List[str] = []
    limit: int = Field(default=DEFAULT_LIMIT, description="Page size requested from the API")
