"""PairList — the ordered map type produced by the decoder.

A tnetstring map is a sequence of key/value envelopes.  Nothing on the
wire forbids repeated keys or unhashable keys (a list can be a key), so
the decoder can't hand back a dict without losing information.  PairList
keeps every pair in wire order; collapsing duplicates is left to the
consumer via get()/to_dict(), which are last-write-wins like dict().
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Tuple, Union

_MISSING = object()


class PairList:
    """Ordered, duplicate-preserving sequence of (key, value) pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]], None] = None) -> None:
        self._pairs: List[Tuple[Any, Any]] = []
        if pairs is None:
            return
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        for key, value in pairs:
            self._pairs.append((key, value))

    def append(self, key: Any, value: Any) -> None:
        self._pairs.append((key, value))

    # ── Sequence protocol ────────────────────────────────────

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __getitem__(self, index: int) -> Tuple[Any, Any]:
        return self._pairs[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PairList):
            return self._pairs == other._pairs
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "PairList({!r})".format(self._pairs)

    # ── dict-like reads ──────────────────────────────────────

    def keys(self) -> List[Any]:
        return [k for k, _ in self._pairs]

    def values(self) -> List[Any]:
        return [v for _, v in self._pairs]

    def items(self) -> List[Tuple[Any, Any]]:
        return list(self._pairs)

    def get(self, key: Any, default: Any = None) -> Any:
        """Value of the last pair whose key equals `key`."""
        found = _MISSING
        for k, v in self._pairs:
            if k == key:
                found = v
        return default if found is _MISSING else found

    def get_all(self, key: Any) -> List[Any]:
        """Values of every pair whose key equals `key`, in wire order."""
        return [v for k, v in self._pairs if k == key]

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self._pairs)

    def to_dict(self) -> Dict[Any, Any]:
        """Collapse into a dict.  Later duplicates overwrite earlier ones.

        Raises TypeError if a key is unhashable: a decoded list, or a
        zero-copy view into a bytearray.
        """
        return dict(self._pairs)
