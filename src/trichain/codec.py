"""
Text serialization for triplet stores.

Layout of a snapshot::

    TriChain 1
    ---
    <number of triplets>
    ---
    ["a", "b", "c", 3]
    ...

Every body line is a JSON array, so tokens holding commas, spaces, quotes or
newlines survive the round trip.
"""

import json
import logging
from typing import Final

from .exceptions import InvalidTripletError, SnapshotError
from .store import TripletStore

PREFIX: Final[str] = "TriChain"
FORMAT_VERSION: Final[str] = "1"
MARKER: Final[str] = "---"

log = logging.getLogger(__name__)


def serialize(store: TripletStore) -> str:
    """Encode the whole store as a text blob (most frequent triplets first)."""
    entries = sorted(store.items(), key=lambda item: (-item[1], item[0]))
    lines = [f"{PREFIX} {FORMAT_VERSION}", MARKER, str(len(entries)), MARKER]
    for (a, b, c), n in entries:
        lines.append(json.dumps([a, b, c, n], ensure_ascii=False))
    return "\n".join(lines) + "\n"


def deserialize(blob: str) -> TripletStore:
    """
    Decode a text blob produced by :func:`serialize`.

    A JSON object of ``"a,b,c" -> count`` (the legacy snapshot layout) is also
    accepted.

    :raises SnapshotError: If the blob is not a valid encoding of a store.
    """
    if not isinstance(blob, str):
        raise SnapshotError(f"snapshot must be text, got {type(blob).__name__}")

    if blob.lstrip().startswith("{"):
        return _deserialize_legacy(blob)

    # json escapes "\n" inside tokens, so only record boundaries remain
    lines = blob.split("\n")
    if len(lines) < 4:
        raise SnapshotError("truncated snapshot header")

    # header: prefix and format version
    header = lines[0].strip().split(" ")
    if len(header) != 2 or header[0] != PREFIX:
        raise SnapshotError(f"unrecognised snapshot header: {lines[0]!r}", line_no=1)
    if header[1] != FORMAT_VERSION:
        raise SnapshotError(
            f"snapshot format mismatch: (expected {FORMAT_VERSION}) (got {header[1]})",
            line_no=1,
        )
    if lines[1].strip() != MARKER:
        raise SnapshotError(
            f"start sequence marker missing: (expected {MARKER}) (got {lines[1].strip()})",
            line_no=2,
        )
    try:
        n_triplets = int(lines[2].strip())
        if n_triplets < 0:
            raise ValueError()
    except ValueError:
        raise SnapshotError(f"invalid triplet count: {lines[2].strip()}", line_no=3)
    if lines[3].strip() != MARKER:
        raise SnapshotError(
            f"end sequence marker missing: (expected {MARKER}) (got {lines[3].strip()})",
            line_no=4,
        )

    store = TripletStore()
    body = [(i, line) for i, line in enumerate(lines[4:], start=5) if line.strip()]
    for line_no, line in body:
        try:
            record = json.loads(line)
        except json.JSONDecodeError as e:
            raise SnapshotError("invalid triplet record", line_no=line_no) from e
        if not isinstance(record, list) or len(record) != 4:
            raise SnapshotError(
                "triplet record must be [a, b, c, count]", line_no=line_no
            )
        *triplet, n = record
        _add_entry(store, triplet, n, line_no=line_no)

    if len(store) != n_triplets:
        raise SnapshotError(
            f"triplet count mismatch: (expected {n_triplets}) (got {len(store)})"
        )

    log.debug(f"decoded {len(store)} triplets")
    return store


def _deserialize_legacy(blob: str) -> TripletStore:
    """Decode a flat ``{"a,b,c": count}`` object."""
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        raise SnapshotError("invalid legacy snapshot", line_no=e.lineno) from e
    if not isinstance(data, dict):
        raise SnapshotError("legacy snapshot must be a JSON object")

    store = TripletStore()
    for key, n in data.items():
        parts = key.split(",")
        # a token containing the delimiter makes the key ambiguous
        if len(parts) != 3:
            raise SnapshotError(f"ambiguous legacy key: {key!r}")
        _add_entry(store, parts, n)

    log.info(f"imported {len(store)} triplets from legacy snapshot")
    return store


def _add_entry(
    store: TripletStore, triplet: list, n: object, *, line_no: int | None = None
) -> None:
    if not all(isinstance(tok, str) for tok in triplet):
        raise SnapshotError("tokens must be strings", line_no=line_no)
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise SnapshotError(f"count must be a positive integer: {n!r}", line_no=line_no)
    a, b, c = triplet
    if (a, b, c) in store:
        raise SnapshotError(f"duplicate triplet: {(a, b, c)!r}", line_no=line_no)
    try:
        store.increment(a, b, c, count=n)
    except InvalidTripletError as e:
        raise SnapshotError(str(e), line_no=line_no) from e


__all__ = ["serialize", "deserialize", "PREFIX", "FORMAT_VERSION"]
