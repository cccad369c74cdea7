"""
Weighted multi-field fuzzy index.

Each record is flattened once into per-key string values. A query is scored against
every value of every key; a record is a hit when at least one value matches. The
record score multiplies the matched value scores, each raised to
(normalized key weight * field-length norm), so strong matches on heavy, short fields
rank first. Hits are ordered by score, ties by position in the source collection.
"""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from fuzzy.extended import ExtendedMatcher
from fuzzy.scoring import DEFAULT_THRESHOLD, FuzzyMatcher

EPSILON = sys.float_info.epsilon
_TOKEN_RE = re.compile(r"[^ ]+")


@dataclass(frozen=True)
class WeightedKey:
    name: str
    weight: float = 1.0


@dataclass(frozen=True)
class SearchHit:
    item: Any
    ref_index: int
    score: float


@lru_cache(maxsize=1024)
def _norm_for_tokens(num_tokens: int) -> float:
    return round(1 / math.sqrt(num_tokens), 3)


def field_norm(text: str) -> float:
    """Longer values weigh less: 1/sqrt(token count), rounded to 3 places."""
    return _norm_for_tokens(max(1, len(_TOKEN_RE.findall(text))))


def flatten_values(value: Any) -> List[str]:
    """Collect the string leaves of a field value (lists, mappings and models included)."""
    out: List[str] = []

    def _walk(v: Any) -> None:
        if v is None:
            return
        if isinstance(v, str):
            if v.strip():
                out.append(v)
        elif isinstance(v, bool):
            out.append(str(v).lower())
        elif isinstance(v, (int, float)):
            out.append(str(v))
        elif hasattr(v, "model_dump"):
            _walk(v.model_dump(exclude_none=True))
        elif isinstance(v, Mapping):
            for child in v.values():
                _walk(child)
        elif isinstance(v, (list, tuple, set, frozenset)):
            for child in v:
                _walk(child)

    _walk(value)
    return out


def get_field(record: Any, path: str) -> Any:
    """Resolve a dotted key (`effects.type`) on dicts or attribute objects, mapping over lists."""
    current: List[Any] = [record]
    for part in path.split("."):
        nxt: List[Any] = []
        for obj in current:
            if isinstance(obj, (list, tuple)):
                items = obj
            else:
                items = [obj]
            for item in items:
                if isinstance(item, Mapping):
                    val = item.get(part)
                else:
                    val = getattr(item, part, None)
                if val is not None:
                    nxt.append(val)
        current = nxt
    return current


def normalize_keys(keys: Iterable[WeightedKey | Tuple[str, float] | str]) -> Tuple[WeightedKey, ...]:
    parsed: List[WeightedKey] = []
    for k in keys:
        if isinstance(k, WeightedKey):
            parsed.append(k)
        elif isinstance(k, str):
            parsed.append(WeightedKey(k))
        else:
            name, weight = k
            parsed.append(WeightedKey(name, float(weight)))

    if not parsed:
        raise ValueError("FuzzyIndex needs at least one key")
    for k in parsed:
        if k.weight <= 0:
            raise ValueError(f"Key weight must be positive: {k.name}={k.weight}")

    total = sum(k.weight for k in parsed)
    return tuple(WeightedKey(k.name, k.weight / total) for k in parsed)


class FuzzyIndex:
    def __init__(
        self,
        records: Sequence[Any],
        keys: Iterable[WeightedKey | Tuple[str, float] | str],
        *,
        threshold: float = DEFAULT_THRESHOLD,
        use_extended_search: bool = False,
        ignore_location: bool = True,
        getter: Optional[Callable[[Any, str], Any]] = None,
    ):
        self.keys = normalize_keys(keys)
        self.threshold = threshold
        self.use_extended_search = use_extended_search
        self.ignore_location = ignore_location
        self._getter = getter or get_field
        self._docs = [(i, rec, self._index_record(rec)) for i, rec in enumerate(records)]

    def __len__(self) -> int:
        return len(self._docs)

    @property
    def key_names(self) -> Tuple[str, ...]:
        return tuple(k.name for k in self.keys)

    def _index_record(self, record: Any) -> Dict[str, List[Tuple[str, float]]]:
        fields: Dict[str, List[Tuple[str, float]]] = {}
        for key in self.keys:
            values = flatten_values(self._getter(record, key.name))
            fields[key.name] = [(v.lower(), field_norm(v)) for v in values]
        return fields

    def _matcher(self, query: str):
        if self.use_extended_search:
            return ExtendedMatcher(query, self.threshold, self.ignore_location)
        return FuzzyMatcher(query, self.threshold, self.ignore_location)

    def search(self, query: str) -> List[SearchHit]:
        if not query or not query.strip():
            return []
        matcher = self._matcher(query)

        hits: List[SearchHit] = []
        for ref_index, record, fields in self._docs:
            total = 1.0
            matched = False
            for key in self.keys:
                for text, norm in fields[key.name]:
                    is_match, score = matcher.search_in(text)
                    if not is_match:
                        continue
                    matched = True
                    total *= (EPSILON if score == 0 else score) ** (key.weight * norm)
            if matched:
                hits.append(SearchHit(record, ref_index, total))

        hits.sort(key=lambda h: (h.score, h.ref_index))
        return hits
