"""
Counted multiset of token triplets, the only persistent state of a chain.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Final

from .exceptions import InvalidTripletError
from .types import Prefix, Token, Triplet

BEGIN: Final[str] = "__BEGINNING_OF_SENTENCE__"
END: Final[str] = "__END_OF_SENTENCE__"
SENTINELS: Final[frozenset[str]] = frozenset({BEGIN, END})

log = logging.getLogger(__name__)


def validate_triplet(triplet: Triplet) -> None:
    """
    Check sentinel placement for a triplet.

    ``BEGIN`` may only lead a triplet and ``END`` may only close one.

    :raises InvalidTripletError: If the triplet is not three strings or a sentinel is misplaced.
    """
    if len(triplet) != 3 or not all(isinstance(tok, str) for tok in triplet):
        raise InvalidTripletError("triplet must hold three strings", triplet=triplet)
    a, b, c = triplet
    if b in SENTINELS or a == END or c == BEGIN:
        raise InvalidTripletError("sentinel in invalid position", triplet=triplet)


class TripletStore:
    """
    Mapping of triplet -> occurrence count, with lookup indexes.

    Keys are plain tuples so equality and hashing follow the token values.
    Three secondary indexes are kept in step with the counts:

    - head token -> triplets (one-token prefix lookup, used for ``BEGIN``)
    - (first, second) -> triplets (two-token prefix lookup)
    - token -> triplets referencing it anywhere (forgetting)
    """

    def __init__(self) -> None:
        self._counts: dict[Triplet, int] = {}
        self._by_head: dict[Token, set[Triplet]] = {}
        self._by_prefix: dict[tuple[Token, Token], set[Triplet]] = {}
        self._by_token: dict[Token, set[Triplet]] = {}

    def increment(self, a: Token, b: Token, c: Token, count: int = 1) -> int:
        """
        Add ``count`` occurrences of ``(a, b, c)``, inserting the triplet if absent.

        :returns: The updated count.
        :raises InvalidTripletError: If ``count`` is not positive or a sentinel is misplaced.
        """
        triplet: Triplet = (a, b, c)
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidTripletError(
                f"count must be a positive integer, got {count!r}", triplet=triplet
            )
        current = self._counts.get(triplet)
        if current is None:
            validate_triplet(triplet)
            self._index(triplet)
            current = 0
        self._counts[triplet] = current + count
        return current + count

    def count(self, triplet: Triplet) -> int:
        """Return the stored count, 0 when absent."""
        return self._counts.get(tuple(triplet), 0)

    def candidates_by_prefix(self, prefix: Prefix) -> list[tuple[Triplet, int]]:
        """
        Return stored triplets whose leading tokens equal ``prefix`` with their counts.

        :param prefix: One token (e.g. ``(BEGIN,)``) or two tokens.
        :raises ValueError: For any other prefix length.
        """
        match len(prefix):
            case 1:
                matches = self._by_head.get(prefix[0], ())
            case 2:
                matches = self._by_prefix.get((prefix[0], prefix[1]), ())
            case _:
                raise ValueError(f"prefix must hold 1 or 2 tokens, got {len(prefix)}")
        # sorted so a seeded rng gives reproducible walks
        return [(triplet, self._counts[triplet]) for triplet in sorted(matches)]

    def remove(self, triplet: Triplet) -> bool:
        """Delete a triplet with its whole count. Returns whether it was present."""
        triplet = tuple(triplet)
        if triplet not in self._counts:
            return False
        del self._counts[triplet]
        self._unindex(triplet)
        return True

    def remove_tokens(self, tokens: Iterable[Token]) -> int:
        """
        Delete every triplet that references any of ``tokens``.

        :returns: Number of triplets removed.
        """
        doomed: set[Triplet] = set()
        for tok in set(tokens):
            doomed.update(self._by_token.get(tok, ()))
        for triplet in doomed:
            self.remove(triplet)
        log.debug(f"removed {len(doomed)} triplets")
        return len(doomed)

    def clear(self) -> None:
        self._counts.clear()
        self._by_head.clear()
        self._by_prefix.clear()
        self._by_token.clear()

    def items(self) -> Iterator[tuple[Triplet, int]]:
        return iter(self._counts.items())

    def total(self) -> int:
        """Sum of all counts."""
        return sum(self._counts.values())

    def copy(self) -> "TripletStore":
        clone = TripletStore()
        for triplet, n in self._counts.items():
            clone.increment(*triplet, count=n)
        return clone

    def _index(self, triplet: Triplet) -> None:
        a, b, _ = triplet
        self._by_head.setdefault(a, set()).add(triplet)
        self._by_prefix.setdefault((a, b), set()).add(triplet)
        for tok in set(triplet):
            self._by_token.setdefault(tok, set()).add(triplet)

    def _unindex(self, triplet: Triplet) -> None:
        a, b, _ = triplet
        _discard(self._by_head, a, triplet)
        _discard(self._by_prefix, (a, b), triplet)
        for tok in set(triplet):
            _discard(self._by_token, tok, triplet)

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, triplet: object) -> bool:
        return isinstance(triplet, tuple) and triplet in self._counts

    def __iter__(self) -> Iterator[Triplet]:
        return iter(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TripletStore):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(triplets={len(self)}, total={self.total()})"


def _discard[K](index: dict[K, set[Triplet]], key: K, triplet: Triplet) -> None:
    """Remove ``triplet`` from ``index[key]`` and drop the bucket once empty."""
    bucket = index.get(key)
    if bucket is None:
        return
    bucket.discard(triplet)
    if not bucket:
        del index[key]
