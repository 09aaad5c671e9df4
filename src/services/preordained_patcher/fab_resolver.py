"""Works out which preordained fabs replace a common06/common07 armor piece.

The fab names follow the game's naming convention, not a lookup table, so
every rule here is an assumption about how the assets are named. A name that
does not exist means the assumption is wrong for that piece.
"""

from typing import Tuple

from constants import HELMET_CATEGORY, MAGE_PREFIX, ROGUE_PREFIX

from .errors import ResolutionError
from .models import SymbolMaps


def fab_names_for(category: str, prefix: str) -> Tuple[str, str]:
    """Return the (male, female) fab names for an armor category."""
    if prefix == MAGE_PREFIX:
        return (
            f"mit_preordained_mage_{category}_01",
            f"mit_preordained_mage_f_{category}_01",
        )
    if prefix == ROGUE_PREFIX and category == HELMET_CATEGORY:
        # Rogue helmets are named after the item, not the slot
        return ("mit_preordained_helmet_01", "mit_preordained_f_helmet_01")
    if prefix == ROGUE_PREFIX:
        return (
            f"mit_preordained_{category}_01",
            f"mit_preordained_f_{category}_01",
        )
    return (f"me_armor_{category}", f"me_armor_female_{category}")


def resolve_fab_ids(maps: SymbolMaps, category: str, prefix: str) -> Tuple[int, int]:
    """Resolve the (male, female) fab ids for an armor category.

    Raises:
        ResolutionError: If either fab name is not in the fab symbol table.
    """
    ids = []
    for name in fab_names_for(category, prefix):
        fab_id = maps.fab_id(name)
        if fab_id is None:
            raise ResolutionError(
                f"Fab {name!r} not found (category {category!r}, prefix {prefix!r})"
            )
        ids.append(fab_id)
    return ids[0], ids[1]
