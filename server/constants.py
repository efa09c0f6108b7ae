"""
Card and table constants for Presidente.

This module is the single source of truth for rank ordering, suits,
deal sizes and finish titles. game.py derives its enums and lookups
from these tables.

Rank Order (lowest to highest):
    3 < 4 < 5 < 6 < 7 < 8 < 9 < 10 < J < Q < K < A < 2

Suit never affects comparison; it only makes each card unique.
"""

# =============================================================================
# Card Values - Single Source of Truth
# =============================================================================

# Rank strings mapped to their strength. "2" wraps around to the top.
RANK_ORDER: dict[str, int] = {
    '3': 3,
    '4': 4,
    '5': 5,
    '6': 6,
    '7': 7,
    '8': 8,
    '9': 9,
    '10': 10,
    'J': 11,
    'Q': 12,
    'K': 13,
    'A': 14,
    '2': 15,
}

SUIT_NAMES: tuple[str, ...] = ("clubs", "diamonds", "hearts", "spades")


# =============================================================================
# Match Constants
# =============================================================================

PLAYERS_PER_MATCH = 4
CARDS_PER_PLAYER = 13
DECK_SIZE = len(RANK_ORDER) * len(SUIT_NAMES)

# Titles by finish position, as called at the table.
FINISH_TITLES: dict[int, str] = {
    1: "Presidente",
    2: "Vice",
    3: "Sobre",
    4: "Cu",
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_rank_value(rank_str: str) -> int:
    """
    Get the comparison value for a rank string.

    Args:
        rank_str: Card rank as string ('3', ..., 'A', '2').

    Returns:
        Integer strength, 3 (lowest) through 15 (the "2").

    Raises:
        KeyError: If rank_str is not a known rank.
    """
    return RANK_ORDER[rank_str]


def get_finish_title(position: int) -> str:
    """Title for a finish position, or empty string if unknown."""
    return FINISH_TITLES.get(position, "")
