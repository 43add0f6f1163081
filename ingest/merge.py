from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from utils.ids import new_record_id

log = logging.getLogger("dosedash.ingest.merge")


class MergePolicy:
    """How an incoming aggregate record combines with the stored record for the same key."""

    name = "abstract"

    def apply(self, existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class ReplaceOnKeyMatch(MergePolicy):
    """
    Whole-record replacement. A re-upload of an incomplete file for a key drops
    breakdown dimensions that were stored for it before.
    """

    name = "replace_on_key_match"

    def apply(self, existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
        return dict(incoming)


class ShallowFieldMerge(MergePolicy):
    """Top-level field union: stored fields absent from the incoming record survive."""

    name = "shallow_field_merge"

    def apply(self, existing: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
        return {**existing, **incoming}


DEFAULT_POLICY: MergePolicy = ReplaceOnKeyMatch()


@dataclass
class MergeResult:
    added: int = 0
    updated: int = 0


def _with_id(record_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
    out = {"id": record_id}
    out.update({k: v for k, v in body.items() if k != "id"})
    return out


def upsert_records(
    collection: List[Dict[str, Any]],
    records: Iterable[Dict[str, Any]],
    key_field: str,
    policy: Optional[MergePolicy] = None,
    sort_desc: bool = False,
) -> MergeResult:
    """
    Merge `records` into `collection` in place by natural key.

    A match keeps the stored `id` and counts as updated; anything else gets a fresh
    id and is appended. Date-keyed collections pass `sort_desc=True` so the most
    recent key comes first; location-keyed ones keep first-insertion order.
    """
    policy = policy or DEFAULT_POLICY
    result = MergeResult()
    index: Dict[Any, int] = {}
    for i, rec in enumerate(collection):
        index.setdefault(rec.get(key_field), i)

    for rec in records:
        key = rec.get(key_field)
        i = index.get(key)
        if i is not None:
            existing = collection[i]
            merged = policy.apply(existing, rec)
            collection[i] = _with_id(existing.get("id") or new_record_id(), merged)
            result.updated += 1
        else:
            collection.append(_with_id(new_record_id(), rec))
            index[key] = len(collection) - 1
            result.added += 1

    if sort_desc:
        collection.sort(key=lambda r: str(r.get(key_field) or ""), reverse=True)

    log.debug(
        "upsert_merge",
        extra={"extra": {"key_field": key_field, "policy": policy.name, "added": result.added, "updated": result.updated}},
    )
    return result
