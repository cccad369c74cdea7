"""
traitsearch/factory.py

Build the search services from the YAML runtime config.
- One CatalogSearchService per configured endpoint (dataset, limit policy, extended syntax, strictness).
- Optional PerkSearchService for the legacy /search endpoint.
- Loads every dataset eagerly so a bad file fails at startup, not on the first request.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from catalog.loader import load_perks, load_traits
from traitsearch.schemas import RuntimeConfig
from traitsearch.services.search_service import CatalogSearchService, PerkSearchService
from traitsearch.settings import settings

load_dotenv()


@dataclass(frozen=True)
class SearchServices:
    config: RuntimeConfig
    traits: Dict[str, CatalogSearchService] = field(default_factory=dict)
    perks: Optional[PerkSearchService] = None

    def catalog_sizes(self) -> Dict[str, int]:
        sizes = {name: len(svc.records) for name, svc in self.traits.items()}
        if self.perks is not None:
            sizes["perks"] = len(self.perks.records)
        return sizes


def _load_cfg(cfg_path: str | Path) -> Dict[str, Any]:
    p = Path(cfg_path).expanduser()
    if not p.exists():
        raise FileNotFoundError(f"Runtime config not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_runtime_config(cfg_path: str | Path | None = None) -> RuntimeConfig:
    cfg_path = cfg_path or os.environ.get("TRAITS_RUNTIME_CONFIG") or settings.runtime_config
    return RuntimeConfig.model_validate(_load_cfg(cfg_path))


def _dataset_path(data_dir: Path, dataset: str) -> Path:
    p = Path(dataset)
    return p if p.is_absolute() else data_dir / p


def build_trait_service(
    cfg: RuntimeConfig,
    endpoint_name: str,
    data_dir: str | Path | None = None,
) -> CatalogSearchService:
    data_dir = Path(data_dir or settings.data_dir)
    for endpoint in cfg.endpoints:
        if endpoint.name == endpoint_name:
            records = load_traits(_dataset_path(data_dir, endpoint.dataset))
            return CatalogSearchService(records, endpoint, cfg.search)
    known = ", ".join(e.name for e in cfg.endpoints) or "<none>"
    raise ValueError(f"Unknown endpoint {endpoint_name!r}; configured: {known}")


def build_services(
    cfg: RuntimeConfig | None = None,
    data_dir: str | Path | None = None,
    cfg_path: str | Path | None = None,
) -> SearchServices:
    """Load every dataset the runtime config names (reading the config first if not given)."""
    cfg = cfg or load_runtime_config(cfg_path)
    data_dir = Path(data_dir or settings.data_dir)

    traits = {e.name: build_trait_service(cfg, e.name, data_dir) for e in cfg.endpoints}

    perks = None
    if cfg.perks is not None:
        perks = PerkSearchService(load_perks(_dataset_path(data_dir, cfg.perks.dataset)), cfg.perks)

    return SearchServices(config=cfg, traits=traits, perks=perks)
