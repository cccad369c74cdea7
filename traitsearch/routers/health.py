# Purpose:
# Defines the /api/health endpoint for the Trait Search API.
# - Reports the record count of every loaded catalog.
# - Useful for monitoring and deployment probes; only answers once startup loading succeeded.
# traitsearch/routers/health.py
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    services = request.app.state.services
    return {
        "status": "ok",
        "catalogs": services.catalog_sizes(),
    }
