# traitsearch/routers/traits.py
# Purpose: Registers one GET/OPTIONS pair per trait endpoint in the runtime config.
# - Every endpoint shares the same handler; only the injected service differs.
# - Query params: q, name, description, tags, effects, limit. Underscore-prefixed keys are ignored; other unknown keys are a 400.
# - Returns {total, returned, params, results}; 400 {error} on bad input, 500 otherwise.

import logging
from typing import Iterable

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from traitsearch.errors import SearchError
from traitsearch.routers.responses import (
    cors_headers,
    error_response,
    internal_error_response,
    preflight_response,
)
from traitsearch.schemas import EndpointConfig, ErrorResponse, TraitSearchResponse

logger = logging.getLogger(__name__)


def make_search_handler(endpoint_name: str):
    def search_traits(request: Request):
        try:
            service = request.app.state.services.traits[endpoint_name]
            payload = service.search_service(request.query_params)
        except SearchError as e:
            return error_response(e.status_code, str(e))
        except Exception:
            logger.exception("Error processing %s request", endpoint_name)
            return internal_error_response()

        payload["results"] = [r.model_dump(exclude_none=True) for r in payload["results"]]
        return JSONResponse(content=payload, headers=cors_headers("GET"))

    search_traits.__name__ = f"search_{endpoint_name.replace('-', '_')}"
    return search_traits


def options_handler(request: Request):
    return preflight_response()


def build_router(endpoints: Iterable[EndpointConfig]) -> APIRouter:
    router = APIRouter(tags=["traits"])
    for endpoint in endpoints:
        router.add_api_route(
            endpoint.path,
            make_search_handler(endpoint.name),
            methods=["GET"],
            name=f"traits:{endpoint.name}",
            response_model=TraitSearchResponse,
            response_model_exclude_none=True,
            responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
            summary=f"Fuzzy trait search ({endpoint.name})",
        )
        router.add_api_route(
            endpoint.path,
            options_handler,
            methods=["OPTIONS"],
            name=f"traits:{endpoint.name}:options",
            include_in_schema=False,
        )
    return router
