"""
Unit tests for the SearchQuery model.
"""
import pytest
from pydantic import ValidationError
from pokedex_search.models.search import SearchQuery


class TestSearchQuery:
    """Test suite for the SearchQuery model."""

    def test_search_query_defaults(self):
        """Test that only the name is required."""
        query = SearchQuery(name="bulbasaur")

        assert query.name == "bulbasaur"
        assert query.types == []
        assert query.limit == 10

    def test_search_query_all_fields(self):
        """Test a fully specified query."""
        query = SearchQuery(name="bulbasaur", types=["Grass", "Fairy"], limit=5)

        assert query.types == ["Grass", "Fairy"]
        assert query.limit == 5

    def test_search_query_empty_name_allowed(self):
        """Test that an empty name is not rejected."""
        query = SearchQuery(name="")

        assert query.name == ""

    def test_search_query_requires_name(self):
        """Test that name is required."""
        with pytest.raises(ValidationError):
            SearchQuery()

    def test_search_query_types_default_not_shared(self):
        """Test that the default types list is not shared between instances."""
        first = SearchQuery(name="a")
        first.types.append("Fire")

        assert SearchQuery(name="b").types == []
