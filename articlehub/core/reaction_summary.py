"""Reaction Summary — pure aggregation of per-subject reaction tallies.

Invariants:
    - Every catalog kind appears for every subject, in catalog order, count 0 if unused
    - user_reacted is False everywhere when there is no requester
    - users list is sorted and deduplicated; only included when requested

Design Decisions:
    - Shell runs one grouped query per batch of subjects and hands raw rows here
      (ADR: no N+1 query per listed article/comment)
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from articlehub.core.domain_types import ReactionKind


def summarize_reactions(
    catalog: Sequence[ReactionKind],
    subject_ids: Iterable[int],
    counts: Iterable[tuple[int, int, int]],
    held: Iterable[tuple[int, int]] = (),
    holders: Iterable[tuple[int, int, str]] | None = None,
) -> dict[int, list[dict]]:
    """Build reaction summaries keyed by subject id.

    counts:  (subject_id, kind_id, count) rows
    held:    (subject_id, kind_id) rows held by the requester
    holders: (subject_id, kind_id, username) rows, or None to omit "users"
    """
    count_map: dict[tuple[int, int], int] = {
        (subject_id, kind_id): int(n) for subject_id, kind_id, n in counts
    }
    held_set = set(held)
    holder_map: dict[tuple[int, int], set[str]] = defaultdict(set)
    if holders is not None:
        for subject_id, kind_id, username in holders:
            holder_map[(subject_id, kind_id)].add(username)

    summaries: dict[int, list[dict]] = {}
    for subject_id in subject_ids:
        entries = []
        for kind in catalog:
            key = (subject_id, kind.id)
            entry = {
                "id": kind.id,
                "emoji": kind.emoji,
                "name": kind.display_name,
                "count": count_map.get(key, 0),
                "user_reacted": key in held_set,
            }
            if holders is not None:
                entry["users"] = sorted(holder_map.get(key, ()))
            entries.append(entry)
        summaries[subject_id] = entries
    return summaries


def total_reactions(summary: Sequence[dict]) -> int:
    return sum(entry["count"] for entry in summary)
