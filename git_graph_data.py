# git_graph_data.py

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

MIN_PALETTE_SIZE = 8

DEFAULT_PALETTE = (
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#14b8a6",  # teal
    "#f97316",  # orange
)


class InvalidInputError(ValueError):
    """A commit record that cannot be turned into a Commit (bad id, parent reference or metadata type)."""


@dataclass(frozen=True)
class Commit:
    id: str
    parent_ids: tuple[str, ...] = ()
    author: str = ""
    message: str = ""
    timestamp: int = 0
    email: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1

    def __repr__(self) -> str:
        return (
            f"Commit(id='{self.short_id}', "
            f"parents={[p[:7] for p in self.parent_ids]}, "
            f"message='{self.message[:20]}...')"
        )


@dataclass(frozen=True)
class GraphConfig:
    """Geometry and palette used by the layout builder and the hit tester."""

    node_radius: float = 6
    row_height: float = 50
    column_width: float = 30
    margin_left: float = 20
    hit_slack: float = 5
    palette: tuple[str, ...] = field(default=DEFAULT_PALETTE)

    def __post_init__(self):
        palette = tuple(self.palette or ())
        if len(set(palette)) < MIN_PALETTE_SIZE:
            logging.warning(
                "GraphConfig: palette has %d distinct colors, need at least %d; using default palette",
                len(set(palette)),
                MIN_PALETTE_SIZE,
            )
            palette = DEFAULT_PALETTE
        object.__setattr__(self, "palette", palette)


@dataclass(frozen=True)
class GraphNode:
    commit: Commit
    lane: int
    row: int
    x: float
    y: float
    color: str

    @property
    def id(self) -> str:
        return self.commit.id


def _parse_parent_ids(raw: Any, commit_id: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    # git's %P placeholder gives space separated hashes
    if isinstance(raw, str):
        return tuple(raw.split())
    if not isinstance(raw, Iterable):
        raise InvalidInputError(f"Commit {commit_id}: parent_ids is not a sequence: {raw!r}")

    parents = []
    for parent in raw:
        if not isinstance(parent, str) or not parent.strip():
            raise InvalidInputError(f"Commit {commit_id}: invalid parent reference {parent!r}")
        parents.append(parent.strip())
    return tuple(parents)


def _text_field(record: Mapping[str, Any], key: str, commit_id: str) -> Optional[str]:
    value = record.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidInputError(f"Commit {commit_id}: {key} is not a string: {value!r}")
    return value


def commit_from_record(record: Mapping[str, Any]) -> Commit:
    """
    Builds a Commit from a history record.

    Accepts either ``id`` or ``sha`` as the commit id. Missing or None
    metadata falls back to "" / 0 / None so renderers always get the declared
    types. Raises InvalidInputError for a missing/empty id, an unparseable
    parent, or metadata of the wrong type.
    """
    if not isinstance(record, Mapping):
        raise InvalidInputError(f"Commit record is not a mapping: {record!r}")

    commit_id = record.get("id", record.get("sha"))
    if not isinstance(commit_id, str) or not commit_id.strip():
        raise InvalidInputError(f"Commit record has no usable id: {record!r}")
    commit_id = commit_id.strip()

    timestamp = record.get("timestamp")
    if timestamp is None:
        timestamp = 0
    elif isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not math.isfinite(timestamp):
        raise InvalidInputError(f"Commit {commit_id}: timestamp is not a number: {timestamp!r}")

    return Commit(
        id=commit_id,
        parent_ids=_parse_parent_ids(record.get("parent_ids"), commit_id),
        author=_text_field(record, "author", commit_id) or "",
        message=_text_field(record, "message", commit_id) or "",
        timestamp=int(timestamp),
        email=_text_field(record, "email", commit_id) or None,
    )


def commits_from_records(records: Iterable[Mapping[str, Any]]) -> list[Commit]:
    return [commit_from_record(record) for record in records]
