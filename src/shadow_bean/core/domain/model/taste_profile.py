from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

SENSORY_MIN = 1
SENSORY_MAX = 5
SENSORY_DEFAULT = 3

SENSORY_FIELDS = ("bitterness", "acidity", "body", "flavour")


class RoastLevel(str, Enum):
    LIGHT = "Light"
    MEDIUM = "Medium"
    BALANCED = "Balanced"


class GrindType(str, Enum):
    WHOLE_BEAN = "Whole Bean"
    ESPRESSO = "Espresso"
    MOKA_POT = "Moka Pot"
    FRENCH_PRESS = "French Press"
    POUR_OVER = "Pour Over"
    FILTER = "Filter"


@dataclass(frozen=True)
class TasteProfile:
    """A custom blend as finalised in the configurator.

    Equivalence for cart merging looks only at the four sliders and the two
    enum choices; ``id`` and ``name`` are labels.
    """

    id: str
    name: str
    bitterness: int
    acidity: int
    body: int
    flavour: int
    roast_level: RoastLevel
    grind_type: GrindType

    def __post_init__(self) -> None:
        for attr in SENSORY_FIELDS:
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{attr} must be an integer")
            if not SENSORY_MIN <= value <= SENSORY_MAX:
                raise ValueError(
                    f"{attr} must be between {SENSORY_MIN} and {SENSORY_MAX}"
                )
        # accept raw wire values ("Pour Over") as well as members
        object.__setattr__(self, "roast_level", RoastLevel(self.roast_level))
        object.__setattr__(self, "grind_type", GrindType(self.grind_type))

    def blend_key(self) -> tuple[int, int, int, int, RoastLevel, GrindType]:
        return (
            self.bitterness,
            self.acidity,
            self.body,
            self.flavour,
            self.roast_level,
            self.grind_type,
        )

    def is_equivalent(self, other: "TasteProfile") -> bool:
        return self.blend_key() == other.blend_key()
