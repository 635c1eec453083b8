"""
Primer Symbol Table

Magnitude → symbol lookup (Roman numerals).  Seven entries are literal;
six more are derived with the subtractive rule, each straight from the
base symbols, so the derivation order does not matter.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)

BASE_SYMBOLS: Mapping = MappingProxyType({
    1: "I",
    5: "V",
    10: "X",
    50: "L",
    100: "C",
    500: "D",
    1000: "M",
})

# For each b: b*4 -> sym(b) + sym(b*5), b*9 -> sym(b) + sym(b*10)
SUBTRACTIVE_BASES = (1, 10, 100)

# Largest number expressible without a symbol above M.
MAX_COMPOSABLE = 3999


class SymbolTable(Mapping):
    """Read-only magnitude → symbol table.

    :meth:`lookup` is the safe accessor: any magnitude outside the table,
    including non-integers, yields ``None``.  Subscription follows the
    normal :class:`~collections.abc.Mapping` contract.
    """

    __slots__ = ("_entries", "_descending")

    def __init__(self, entries: Mapping):
        self._entries = MappingProxyType(dict(sorted(entries.items())))
        self._descending = tuple(sorted(self._entries.items(), reverse=True))

    def __getitem__(self, magnitude: int) -> str:
        return self._entries[magnitude]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SymbolTable({dict(self._entries)!r})"

    def lookup(self, magnitude) -> Optional[str]:
        """Return the symbol for *magnitude*, or ``None`` when undefined."""
        if isinstance(magnitude, bool) or not isinstance(magnitude, int):
            return None
        return self._entries.get(magnitude)

    def compose(self, number) -> Optional[str]:
        """
        Render *number* (1..3999) by greedy descent over the table.

        Returns ``None`` for anything outside that range or not an int.
        """
        if isinstance(number, bool) or not isinstance(number, int):
            return None
        if not 1 <= number <= MAX_COMPOSABLE:
            return None

        parts = []
        remaining = number
        for magnitude, symbol in self._descending:
            while remaining >= magnitude:
                parts.append(symbol)
                remaining -= magnitude
        return "".join(parts)


def derive_subtractive_entries(bases: Mapping = BASE_SYMBOLS) -> Dict[int, str]:
    """Compute the six subtractive entries from the base symbols."""
    derived: Dict[int, str] = {}
    for base in SUBTRACTIVE_BASES:
        derived[base * 4] = bases[base] + bases[base * 5]
        derived[base * 9] = bases[base] + bases[base * 10]
    return derived


def build_symbol_table() -> SymbolTable:
    """
    Build the thirteen-entry symbol table.

    Step 1 inserts the literal bases; step 2 adds the derived entries.
    """
    logger.info("Building symbol table...")
    entries: Dict[int, str] = dict(BASE_SYMBOLS)
    entries.update(derive_subtractive_entries(BASE_SYMBOLS))
    table = SymbolTable(entries)
    logger.debug(f"Symbol table built with {len(table)} entries")
    return table
