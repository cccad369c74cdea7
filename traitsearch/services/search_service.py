# traitsearch/services/search_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from catalog.models import Perk, Trait
from fuzzy.index import FuzzyIndex, SearchHit, WeightedKey
from traitsearch.errors import MissingParameterError, UnknownFieldError
from traitsearch.schemas import EndpointConfig, PerkConfig, SearchConfig
from traitsearch.services.params import (
    GLOBAL_QUERY,
    LIMIT_PARAM,
    SearchParams,
    check_known_fields,
    parse_limit,
    sanitize_search_query,
    validate_search_params,
)

logger = logging.getLogger(__name__)


def dedupe_by_name(hits: Iterable[SearchHit]) -> List[SearchHit]:
    """Keep the first hit for each record name, preserving order."""
    seen = set()
    unique: List[SearchHit] = []
    for hit in hits:
        name = hit.item.name
        if name in seen:
            continue
        seen.add(name)
        unique.append(hit)
    return unique


class CatalogSearchService:
    """
    Weighted trait search for one endpoint.

    Built once at startup over an immutable record tuple; holds the default
    all-fields index and builds field-scoped indexes on demand. Safe to share
    across concurrent requests.
    """

    def __init__(self, records: Sequence[Trait], endpoint: EndpointConfig, search_cfg: SearchConfig):
        self.records: Tuple[Trait, ...] = tuple(records)
        self.endpoint = endpoint
        self.search_cfg = search_cfg
        self.field_weights: Dict[str, float] = dict(search_cfg.fields)
        self.default_limit = endpoint.default_limit or search_cfg.default_limit
        self.max_limit = endpoint.max_limit or search_cfg.max_limit
        # Parameter order decides the order field-specific searches run in.
        self.param_names: Tuple[str, ...] = (GLOBAL_QUERY, *self.field_weights)
        self.default_index = self.create_index()

    @property
    def name(self) -> str:
        return self.endpoint.name

    def create_index(self, custom_keys: Optional[Sequence[WeightedKey]] = None) -> FuzzyIndex:
        keys = custom_keys or [WeightedKey(name, weight) for name, weight in self.field_weights.items()]
        return FuzzyIndex(
            self.records,
            keys,
            threshold=self.search_cfg.threshold,
            use_extended_search=self.endpoint.extended_search,
            ignore_location=self.search_cfg.ignore_location,
        )

    def scoped_index(self, fields: Sequence[str]) -> FuzzyIndex:
        """Index over exactly `fields`; reuses the default index when nothing is narrowed."""
        missing = [f for f in fields if f not in self.field_weights]
        if missing:
            raise UnknownFieldError(f"Unknown search field: {', '.join(missing)}")
        if set(fields) == set(self.field_weights):
            return self.default_index
        return self.create_index([WeightedKey(f, self.field_weights[f]) for f in fields])

    def parse_params(self, query: Mapping[str, Any]) -> SearchParams:
        check_known_fields(query.keys(), self.field_weights)

        raw = {k: query[k] for k in self.param_names if query.get(k) is not None}
        if self.endpoint.strict_params:
            validate_search_params(
                raw,
                min_length=self.search_cfg.min_query_length,
                max_length=self.search_cfg.max_query_length,
            )
            values = {k: sanitize_search_query(v) for k, v in raw.items()}
        else:
            values = dict(raw)

        limit = parse_limit(
            query.get(LIMIT_PARAM),
            policy=self.endpoint.limit_policy,
            default=self.default_limit,
            max_limit=self.max_limit,
        )

        params = SearchParams(values=values, limit=limit)
        if not params.has_query():
            raise MissingParameterError("At least one search parameter is required")
        return params

    def search(self, params: SearchParams) -> Tuple[List[SearchHit], List[SearchHit]]:
        """Return (all matches, matches after the limit)."""
        results: List[SearchHit] = []

        field_searches = params.field_searches()
        if field_searches:
            index = self.scoped_index(list(field_searches))
            # OR across fields: every value runs against the same scoped index
            for value in field_searches.values():
                results.extend(index.search(value))
            results = dedupe_by_name(results)

        if params.q:
            q_results = self.default_index.search(params.q)
            if results:
                results = dedupe_by_name(results + q_results)
            else:
                results = q_results

        return results, results[: params.limit]

    def search_service(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        params = self.parse_params(query)
        results, limited = self.search(params)

        logger.info("[%s] search params: %s", self.name, params.values)
        logger.info(
            "[%s] Found %d results, returning %d (limit: %d)",
            self.name, len(results), len(limited), params.limit,
        )

        return {
            "total": len(results),
            "returned": len(limited),
            "params": params.values,
            "results": [hit.item for hit in limited],
        }


class PerkSearchService:
    """Unweighted free-text search over the perk catalog; only `q` is understood."""

    def __init__(self, records: Sequence[Perk], cfg: PerkConfig):
        self.records: Tuple[Perk, ...] = tuple(records)
        self.cfg = cfg
        self.index = FuzzyIndex(
            self.records,
            cfg.keys,
            threshold=cfg.threshold,
            ignore_location=cfg.ignore_location,
        )

    def search(self, q: Optional[str]) -> List[Perk]:
        if not q:
            raise MissingParameterError("Missing query param: q")
        hits = self.index.search(q)
        logger.info("[perks] q=%r matched %d perks", q, len(hits))
        return [hit.item for hit in hits]
