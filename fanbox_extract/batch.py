from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from .config_schema import AppConfig
from .errors import PayloadError
from .filters import ConfigPostFilter
from .normalizer import PostNormalizer
from .run_log import RunLogger
from .store import ResultSink


@dataclass(frozen=True)
class ExtractionRunSummary:
    total: int
    stored: int
    rejected: int
    fee_skipped: int
    failed: int


def _unwrap_envelope(data: Any) -> Any:
    # API responses wrap posts as {"body": post} or {"body": {"items": [...]}}.
    if isinstance(data, Mapping) and "body" in data and "type" not in data:
        inner = data["body"]
        if isinstance(inner, Mapping) and isinstance(inner.get("items"), list):
            return inner["items"]
        return inner
    return data


def load_payload_items(path: str | Path) -> list[dict[str, Any]]:
    """
    Read post payloads saved to disk.

    ``.jsonl`` files hold one post per line. Other files hold a single JSON
    document: a post, a list of posts, or an API response envelope.
    """
    p = Path(path)

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise PayloadError(f"Failed to read input file: {p}") from e

    docs: list[Any] = []
    try:
        if p.suffix.lower() == ".jsonl":
            for line in raw_text.splitlines():
                if line.strip():
                    docs.append(json.loads(line))
        else:
            data = _unwrap_envelope(json.loads(raw_text))
            docs = list(data) if isinstance(data, list) else [data]
    except json.JSONDecodeError as e:
        raise PayloadError(f"Failed to parse JSON in {p}: {e}") from e

    items: list[dict[str, Any]] = []
    for position, doc in enumerate(docs):
        doc = _unwrap_envelope(doc)
        if not isinstance(doc, dict):
            raise PayloadError(f"Item {position} in {p} is not a JSON object")
        items.append(doc)
    return items


def run_extraction(
    config: AppConfig,
    items: Iterable[Mapping[str, Any]],
    *,
    store: ResultSink,
    logger: RunLogger | None = None,
) -> ExtractionRunSummary:
    """
    Normalize every payload into ``store``.

    A payload that fails to parse, or references an unknown embed provider, is
    logged and counted as failed; the remaining posts are still processed.
    """
    normalizer = PostNormalizer(
        ConfigPostFilter(config.filters),
        config.save,
        store,
        logger=logger,
    )

    total = stored = rejected = fee_skipped = failed = 0

    for item in items:
        total += 1
        fee_before = store.skip_due_to_fee
        try:
            result = normalizer.receive(item)
        except PayloadError as e:
            failed += 1
            if logger is not None:
                post_id = item.get("id") if isinstance(item, Mapping) else None
                logger.exception("post_failed", exc=e, post_id=str(post_id or ""))
            continue

        gated = store.skip_due_to_fee != fee_before
        if gated:
            fee_skipped += 1
        if result is not None:
            stored += 1
        elif not gated:
            rejected += 1

    return ExtractionRunSummary(
        total=total,
        stored=stored,
        rejected=rejected,
        fee_skipped=fee_skipped,
        failed=failed,
    )
