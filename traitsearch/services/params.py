"""
Query-string handling shared by the API and the CLI: sanitize, validate lengths,
resolve the limit, and reject unknown fields before any index is touched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

from traitsearch.errors import InvalidLimitError, UnknownFieldError, ValidationError

GLOBAL_QUERY = "q"
LIMIT_PARAM = "limit"
IGNORED_PREFIX = "_"

_QUOTES_RE = re.compile(r"['\"\\]")
_OPERATORS_RE = re.compile(r"[!<>=/]")
_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class SearchParams:
    """Resolved request: query values keyed by parameter name, plus the final limit."""

    values: Dict[str, str] = field(default_factory=dict)
    limit: int = 5

    @property
    def q(self) -> Optional[str]:
        return self.values.get(GLOBAL_QUERY) or None

    def field_searches(self) -> Dict[str, str]:
        """Every non-empty parameter except `q`, in request order."""
        return {k: v for k, v in self.values.items() if k != GLOBAL_QUERY and v}

    def has_query(self) -> bool:
        return any(self.values.values())


def sanitize_search_query(query: str) -> str:
    """Drop quotes, backslashes and the `! < > = /` operators, then trim."""
    query = _QUOTES_RE.sub("", query)
    query = _OPERATORS_RE.sub("", query)
    return query.strip()


def validate_search_params(
    params: Mapping[str, Optional[str]],
    min_length: int = 2,
    max_length: int = 50,
) -> None:
    """Raise ValidationError naming the first parameter outside [min_length, max_length]."""
    for key, value in params.items():
        if value and isinstance(value, str):
            if len(value) < min_length:
                raise ValidationError(f"{key} must be at least {min_length} characters long")
            if len(value) > max_length:
                raise ValidationError(f"{key} must not exceed {max_length} characters")
    return None


def check_known_fields(keys: Iterable[str], weighted_fields: Iterable[str]) -> None:
    """
    Raise UnknownFieldError for keys that would become a search on an unweighted field.
    Underscore-prefixed keys (cache-busters such as `_=123`) are not search fields and pass.
    """
    allowed = set(weighted_fields) | {GLOBAL_QUERY, LIMIT_PARAM}
    unknown = [k for k in keys if k not in allowed and not k.startswith(IGNORED_PREFIX)]
    if unknown:
        raise UnknownFieldError(f"Unknown search field: {', '.join(sorted(unknown))}")


def _parse_int_prefix(raw: str) -> Optional[int]:
    m = _INT_PREFIX_RE.match(raw)
    return int(m.group(1)) if m else None


def parse_limit(
    raw: Optional[str],
    policy: str = "clamp",
    default: int = 5,
    max_limit: int = 20,
) -> int:
    """
    Resolve the `limit` parameter.

    clamp:  unparsable -> default, otherwise clamped into [1, max_limit]
    reject: unparsable or < 1 -> InvalidLimitError, otherwise taken as-is (no upper cap)
    """
    if raw is None or str(raw).strip() == "":
        return default

    value = _parse_int_prefix(str(raw))
    if policy == "clamp":
        if value is None:
            return default
        return min(max(1, value), max_limit)

    if policy == "reject":
        if value is None or value < 1:
            raise InvalidLimitError("Invalid limit parameter: must be a positive number")
        return value

    raise ValueError(f"Unknown limit policy: {policy}")
