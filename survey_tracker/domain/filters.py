"""Conjunctive survey filtering and role-based visibility scoping."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, TypeVar

from survey_tracker.domain.enums import enum_value
from survey_tracker.domain.records import RequestingUser
from survey_tracker.domain.staleness import as_utc

ALL = "all"

T = TypeVar("T")


@dataclass(frozen=True)
class SurveyFilter:
    """Optional predicates; ``None``, blank and ``"all"`` mean "not set"."""

    search_term: str | None = None
    client: str | None = None
    status: str | None = None
    date_from: datetime | date | None = None
    date_to: datetime | date | None = None
    owner_user_id: int | str | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            _is_unset(value)
            for value in (
                self.search_term,
                self.client,
                self.status,
                self.date_from,
                self.date_to,
                self.owner_user_id,
            )
        )


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in {"", ALL}
    return False


def _lower_bound(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _upper_bound(value: datetime | date) -> datetime:
    # A bare date includes the whole day.
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


def _client_matches(survey: Any, client: str) -> bool:
    wanted = client.strip()
    if survey.client_id is not None and str(survey.client_id) == wanted:
        return True
    name = getattr(survey, "client_name", None)
    if name is None:
        name = getattr(getattr(survey, "client", None), "name", None)
    return name is not None and name == wanted


def apply_filter(surveys: Sequence[T], criteria: SurveyFilter | None) -> list[T]:
    """Keep surveys matching every set predicate, preserving input order."""
    if criteria is None or criteria.is_empty:
        return list(surveys)

    search = None if _is_unset(criteria.search_term) else criteria.search_term.strip().lower()
    client = None if _is_unset(criteria.client) else criteria.client
    status = None if _is_unset(criteria.status) else enum_value(criteria.status)
    lower = None if criteria.date_from is None else _lower_bound(criteria.date_from)
    upper = None if criteria.date_to is None else _upper_bound(criteria.date_to)
    owner = None if _is_unset(criteria.owner_user_id) else str(criteria.owner_user_id)

    result = []
    for survey in surveys:
        if search is not None and search not in (survey.system_name or "").lower():
            continue
        if client is not None and not _client_matches(survey, client):
            continue
        if status is not None and enum_value(survey.status) != status:
            continue
        if lower is not None and as_utc(survey.created_at) < lower:
            continue
        if upper is not None and as_utc(survey.created_at) > upper:
            continue
        if owner is not None and str(survey.owner_user_id) != owner:
            continue
        result.append(survey)
    return result


def visible_owner_id(viewer: RequestingUser) -> int | None:
    """Owner id a query must be restricted to, or ``None`` for unrestricted roles."""
    return None if viewer.sees_all_surveys else viewer.user_id


def scope_to_viewer(surveys: Iterable[T], viewer: RequestingUser) -> list[T]:
    owner = visible_owner_id(viewer)
    if owner is None:
        return list(surveys)
    return [s for s in surveys if s.owner_user_id == owner]


def can_view(survey: Any, viewer: RequestingUser) -> bool:
    owner = visible_owner_id(viewer)
    return owner is None or survey.owner_user_id == owner
