import math
import re
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Any) -> Union[int, float]:
    """Parse the leading base-10 integer of a value, NaN when there is none"""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return math.nan if math.isnan(value) or math.isinf(value) else int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        return math.nan
    return int(match.group(1))


class PokemonCard(BaseModel):
    """Normalized Pokémon card, decoupled from the raw API record"""
    api_id: str
    pokedex_num: Optional[int] = None
    name: str
    types: List[str] = []
    hp: Union[int, float] = math.nan
    image_url: Optional[str] = None
    weaknesses: List[str] = []

    @property
    def has_hp(self) -> bool:
        return not (isinstance(self.hp, float) and math.isnan(self.hp))

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PokemonCard":
        """Create PokemonCard from a Pokémon TCG API card record"""
        # nationalPokedexNumber arrives as either 9 or "9"
        pokedex_num = parse_int(data.get("nationalPokedexNumber"))
        return cls(
            api_id=data["id"],
            pokedex_num=None if isinstance(pokedex_num, float) else pokedex_num,
            name=data["name"],
            types=data.get("types") or [],
            hp=parse_int(data.get("hp")),
            image_url=data.get("imageUrl"),
            weaknesses=[
                f"{weakness['type']}{weakness['value']}"
                for weakness in data.get("weaknesses") or []
            ],
        )
