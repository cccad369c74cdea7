"""
Legacy perk search: unweighted fuzzy match over name/description/tags.
Returns a bare JSON list of perks; the only check is that `q` is present.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from traitsearch.errors import SearchError
from traitsearch.routers.responses import cors_headers, error_response, internal_error_response

logger = logging.getLogger(__name__)


def build_router(path: str) -> APIRouter:
    router = APIRouter(tags=["perks"])

    @router.get(path, name="perks:search")
    def search_perks(request: Request):
        try:
            perks = request.app.state.services.perks.search(request.query_params.get("q"))
        except SearchError as e:
            return error_response(e.status_code, str(e))
        except Exception:
            logger.exception("Error processing perk search")
            return internal_error_response()
        return JSONResponse(
            content=[p.model_dump(exclude_none=True) for p in perks],
            headers=cors_headers("GET"),
        )

    return router
