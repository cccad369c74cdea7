# tasks.py
# Invoke is the source of truth.
# Primary:
#   invoke api          -> run the FastAPI app (uvicorn, reload by default)
#   invoke check-data   -> load every configured catalog and fail fast on bad data
# Helpers:
#   invoke query | test

from invoke import task
import os, sys, subprocess
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PY        = sys.executable
API_HOST  = os.environ.get("HOST", "0.0.0.0")
API_PORT  = int(os.environ.get("PORT", "8000"))

# Paths
RUNTIME_CFG = Path(os.environ.get("TRAITS_RUNTIME_CONFIG", "configs/runtime.yaml"))
DATA_DIR    = Path(os.environ.get("TRAITS_DATA_DIR", "data"))

def _run(cmd, env: dict | None = None, **kwargs):
    """Run shell cmd with repo root on PYTHONPATH, plus optional env overrides."""
    base = os.environ.copy()
    root = str(Path(".").resolve())
    base["PYTHONPATH"] = f'{root}{os.pathsep}{base.get("PYTHONPATH","")}'
    if env:
        base.update(env)
    print(f"$ {cmd}")
    return subprocess.run(cmd, shell=True, check=True, env=base, **kwargs)

@task
def api(c, reload=True):
    """Start FastAPI."""
    if not RUNTIME_CFG.exists():
        raise SystemExit(f"Missing runtime config: {RUNTIME_CFG}")
    reload_flag = "--reload" if str(reload).lower() != "false" else ""
    _run(f'{PY} -m uvicorn traitsearch.main:app --host {API_HOST} --port {API_PORT} {reload_flag}')

@task(name="check-data")
def check_data(c):
    """Load every dataset named in the runtime config; exits non-zero on the first bad file."""
    from catalog.loader import DataLoadError
    from traitsearch.factory import build_services

    try:
        services = build_services(cfg_path=RUNTIME_CFG, data_dir=DATA_DIR)
    except DataLoadError as e:
        raise SystemExit(f"[check-data] {e}")
    for name, count in services.catalog_sizes().items():
        print(f"[check-data] {name}: {count} records")

@task
def query(c, q=None, name=None, tags=None, endpoint="traits", limit=None):
    """CLI search against a configured endpoint."""
    args = [f"--endpoint {endpoint}"]
    for flag, value in (("q", q), ("name", name), ("tags", tags), ("limit", limit)):
        if value is not None:
            args.append(f'--{flag} "{value}"')
    _run(f'{PY} -m scripts.query_traits {" ".join(args)}')

@task
def test(c):
    """Run the test suite."""
    _run(f"{PY} -m pytest -q")
