from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Sequence

from .config_schema import FiltersConfig


@dataclass(frozen=True)
class PostCriteria:
    id: str
    fee: int
    date: str
    title: str


@dataclass(frozen=True)
class ResourceCriteria:
    ext: str


class PostFilter(Protocol):
    def check(self, criteria: PostCriteria | ResourceCriteria) -> bool: ...


def parse_platform_datetime(value: str | None) -> datetime | None:
    """Parse a platform timestamp such as ``2023-04-01T12:00:00+09:00``."""
    s = (value or "").strip()
    if not s:
        return None
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None


class ConfigPostFilter:
    """
    Filter driven by the ``filters`` section of the config.

    Posts are checked on id, fee, publish date and title; resources on their
    file extension.
    """

    def __init__(self, filters: FiltersConfig) -> None:
        self._filters = filters

    def check(self, criteria: PostCriteria | ResourceCriteria) -> bool:
        if isinstance(criteria, ResourceCriteria):
            return not self.resource_rejection_reasons(criteria)
        return not self.post_rejection_reasons(criteria)

    def post_rejection_reasons(self, criteria: PostCriteria) -> Sequence[str]:
        f = self._filters
        reasons: list[str] = []

        if criteria.id in f.exclude_post_ids:
            reasons.append("post_id_excluded")

        if f.min_fee is not None and criteria.fee < f.min_fee:
            reasons.append("fee_below_min")
        if f.max_fee is not None and criteria.fee > f.max_fee:
            reasons.append("fee_above_max")

        if f.date_from is not None or f.date_to is not None:
            published = parse_platform_datetime(criteria.date)
            if published is None or published.tzinfo is None:
                reasons.append("date_unparseable")
            else:
                if f.date_from is not None and published < f.date_from:
                    reasons.append("date_before_window")
                if f.date_to is not None and published > f.date_to:
                    reasons.append("date_after_window")

        title = (criteria.title or "").casefold()
        if f.title_include and not any(t.casefold() in title for t in f.title_include):
            reasons.append("title_missing_required_term")
        if any(t.casefold() in title for t in f.title_exclude):
            reasons.append("title_has_excluded_term")

        return reasons

    def resource_rejection_reasons(self, criteria: ResourceCriteria) -> Sequence[str]:
        f = self._filters
        ext = (criteria.ext or "").strip().lstrip(".").casefold()
        reasons: list[str] = []

        if f.allowed_extensions and ext not in f.allowed_extensions:
            reasons.append("extension_not_allowed")
        if ext in f.blocked_extensions:
            reasons.append("extension_blocked")

        return reasons


class ResourceGate:
    """Accepts or rejects a candidate file by extension using the injected filter."""

    def __init__(self, post_filter: PostFilter) -> None:
        self._filter = post_filter

    def candidate_allowed(self, ext: str) -> bool:
        return bool(self._filter.check(ResourceCriteria(ext=ext)))
