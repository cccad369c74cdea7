from pathlib import Path
import json
import sys

import pytest
import yaml

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


TRAITS = [
    {
        "name": "Brave Heart",
        "tags": ["courage", "morale"],
        "description": "Stand firm when allies falter.",
        "effects": [
            {"type": "resist", "value": "25%", "scope": "fear"},
            {"type": "buff", "value": "+10 morale", "duration": "10s"},
        ],
    },
    {
        "name": "Foxx Runner",
        "tags": ["speed"],
        "description": "Sprint faster across open ground.",
        "effects": [{"type": "speed", "value": "+15%"}],
    },
    {
        "name": "Maxx Guard",
        "tags": ["defense"],
        "description": "Block incoming blows with a shield.",
        "effects": [{"type": "block", "value": "20%", "scope": ["melee", "ranged"]}],
    },
    {
        "name": "Iron Skin",
        "tags": ["defense", "armor"],
        "description": "Hardened hide that turns aside light hits.",
        "effects": [{"type": "damage_reduction", "value": "8%"}],
    },
    {
        "name": "Shadow Step",
        "tags": ["stealth", "mobility"],
        "description": "Dash through the dark, breaking line of sight.",
        "effects": [{"type": "teleport", "value": "6m", "note": "shares cooldown with dodge"}],
    },
]

ZOLDY_TRAITS = [
    {
        "name": "Zoldyck Assassin Training",
        "tags": ["assassin", "stealth", "poison"],
        "description": "Silent movement and poison resistance.",
        "effects": [{"type": "immunity", "value": "poison"}],
    },
    {
        "name": "Godspeed",
        "tags": ["speed", "lightning"],
        "description": "Move and react with electric reflexes.",
        "effects": [{"type": "speed", "value": "+40%", "duration": "8s"}],
    },
    {
        "name": "Thunderbolt",
        "tags": ["lightning", "offense"],
        "description": "Release a charged bolt from the hands.",
        "effects": [{"type": "damage", "value": 120}],
    },
    {
        "name": "Heart Theft",
        "tags": ["assassin", "execution"],
        "description": "Remove an enemy's heart in a single motion.",
        "effects": [{"type": "execute", "value": "instant", "condition": "target below 15% health"}],
    },
]

PERKS = [
    {"name": "Sprint Burst", "description": "Break into a sprint for 3 seconds.", "tags": ["speed"]},
    {"name": "Self-Care", "description": "Heal yourself without a med-kit.", "tags": ["healing"]},
    {"name": "Spine Chill", "description": "Know when the killer looks at you.", "tags": ["information"]},
]

MANY_TRAITS = [
    {"name": f"Trait {i:02d}", "tags": ["filler"], "description": "Numbered filler record.", "effects": []}
    for i in range(1, 26)
]


def write_runtime_config(path: Path, **overrides) -> Path:
    config = {
        "search": {
            "threshold": 0.3,
            "fields": {"name": 2, "description": 1, "tags": 1.5, "effects": 1},
            "default_limit": 5,
            "max_limit": 20,
            "min_query_length": 2,
            "max_query_length": 50,
        },
        "endpoints": [
            {
                "name": "traits",
                "path": "/v1/traits-zoldy",
                "dataset": "traits/traits.yaml",
                "limit_policy": "clamp",
                "extended_search": False,
                "strict_params": True,
            },
            {
                "name": "zoldy",
                "path": "/v1/traits/zoldy",
                "dataset": "traits/traits-2.yaml",
                "limit_policy": "reject",
                "extended_search": True,
                "strict_params": False,
            },
            {
                "name": "many",
                "path": "/v1/traits/many",
                "dataset": "traits/many.yaml",
                "limit_policy": "clamp",
            },
            {
                "name": "many-strict",
                "path": "/v1/traits/many-strict",
                "dataset": "traits/many.yaml",
                "limit_policy": "reject",
            },
        ],
        "perks": {"path": "/search", "dataset": "perks.json"},
    }
    config.update(overrides)
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture()
def data_dir(tmp_path):
    root = tmp_path / "data"
    (root / "traits").mkdir(parents=True)
    (root / "traits" / "traits.yaml").write_text(yaml.safe_dump({"traits": TRAITS}), encoding="utf-8")
    (root / "traits" / "traits-2.yaml").write_text(yaml.safe_dump({"traits": ZOLDY_TRAITS}), encoding="utf-8")
    (root / "traits" / "many.yaml").write_text(yaml.safe_dump({"traits": MANY_TRAITS}), encoding="utf-8")
    (root / "perks.json").write_text(json.dumps(PERKS), encoding="utf-8")
    return root


@pytest.fixture()
def runtime_cfg(tmp_path, data_dir):
    return write_runtime_config(tmp_path / "runtime.yaml")


@pytest.fixture()
def services(runtime_cfg, data_dir):
    from traitsearch.factory import build_services

    return build_services(cfg_path=runtime_cfg, data_dir=data_dir)


@pytest.fixture()
def client(runtime_cfg, data_dir):
    from fastapi.testclient import TestClient
    from traitsearch.main import create_app

    app = create_app(runtime_cfg, data_dir=data_dir)
    with TestClient(app) as c:
        yield c
