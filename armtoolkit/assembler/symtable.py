"""Table of labels and the addresses they stand for."""

from __future__ import annotations


class SymbolTable:
    """Maps labels to addresses; the first definition of a label wins."""

    def __init__(self) -> None:
        self._addresses: dict[str, int] = {}

    def store(self, label: str, addr: int) -> None:
        """Record ``label`` at ``addr`` unless it is already defined."""
        self._addresses.setdefault(label, addr)

    def address_of(self, label: str) -> int:
        """Return the address of ``label``; raise KeyError if it is unknown."""
        try:
            return self._addresses[label]
        except KeyError:
            raise KeyError(f"unknown label: {label!r}") from None

    def __contains__(self, label: object) -> bool:
        return label in self._addresses

    def __len__(self) -> int:
        return len(self._addresses)