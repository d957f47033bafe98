"""FastAPI app serving options pages and the REST boxes endpoint."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import HTMLResponse, JSONResponse

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


_load_env_file(ROOT / "app" / ".env")

from optkit.meta_boxes import MetaBoxRenderer
from optkit.nonces import NonceGenerator
from box_registry import BoxRegistry, rest_box
from hook_dispatcher import HookDispatcher
from options_page import OptionsPage
from page_registry import PageRegistry


app = FastAPI(title="optpages")
logger = logging.getLogger("optpages")
logging.basicConfig(level=logging.INFO)

REST_NAMESPACE = os.getenv("OPTPAGES_REST_NAMESPACE", "cmb2/v1").strip().strip("/") or "cmb2/v1"
REST_BASE = "boxes"
NAMESPACE_BASE = f"{REST_NAMESPACE}/{REST_BASE}"
CONFIG_PATH = os.getenv("OPTPAGES_CONFIG", "").strip()

hooks = HookDispatcher()
meta_boxes = MetaBoxRenderer()
nonces = NonceGenerator()
pages = PageRegistry()
boxes = BoxRegistry()

logger.info("rest_namespace=%s config=%s", REST_NAMESPACE, CONFIG_PATH or None)


def _error_response(code: str, message: str, path: str | None = None, detail: dict | None = None, status: int = 400) -> JSONResponse:
    body = {
        "ok": False,
        "errors": [{"code": code, "message": message, "path": path, "detail": detail}],
        "warnings": [],
    }
    return JSONResponse(jsonable_encoder(body), status_code=status)


def _ok_response(payload: dict, warnings: list | None = None, status: int = 200) -> JSONResponse:
    body = {"ok": True, **payload, "errors": [], "warnings": warnings or []}
    return JSONResponse(jsonable_encoder(body), status_code=status)


def register_options_page(page_id: str, option_key: str, props: dict | None = None) -> OptionsPage | None:
    page = OptionsPage(page_id, option_key, props, hooks=hooks, meta_boxes=meta_boxes, nonces=nonces)
    if not page.hookup(pages):
        return None
    return page


def load_config(config: Any) -> dict:
    """Register pages and boxes from a ``{"pages": [...], "boxes": [...]}`` mapping."""
    counts = {"pages": 0, "boxes": 0}
    if not isinstance(config, dict):
        return counts
    for item in config.get("pages") or []:
        if not isinstance(item, dict):
            continue
        page_id = item.get("page_id") or item.get("id")
        option_key = item.get("option_key")
        if not isinstance(page_id, str) or not isinstance(option_key, str):
            logger.warning("config_page_skipped page_id=%s", page_id)
            continue
        if register_options_page(page_id, option_key, item.get("props") or {}):
            counts["pages"] += 1
    for item in config.get("boxes") or []:
        if boxes.register(item):
            counts["boxes"] += 1
    return counts


def _load_config_file(path: str) -> None:
    if not path:
        return
    config_file = Path(path)
    if not config_file.exists():
        logger.warning("config_missing path=%s", path)
        return
    counts = load_config(json.loads(config_file.read_text(encoding="utf-8")))
    logger.info("config_loaded path=%s pages=%s boxes=%s", path, counts["pages"], counts["boxes"])


_load_config_file(CONFIG_PATH)


@app.get("/health")
async def health() -> dict:
    return {"ok": True}


@app.get("/options")
async def list_options_pages(option_key: str | None = None) -> JSONResponse:
    found = pages.get_all() if option_key is None else pages.get_by_options_key(option_key)
    return _ok_response({"pages": [page.summary() for page in (found or {}).values()]})


@app.get("/options/{page_id}")
async def render_options_page(page_id: str) -> Any:
    page = pages.get(page_id)
    if page is None:
        return _error_response("PAGE_NOT_FOUND", "Options page not found", "page_id", status=404)
    return HTMLResponse(page.render())


@app.get(f"/{NAMESPACE_BASE}")
async def get_boxes(request: Request) -> Any:
    readable = boxes.readable()
    if not readable:
        return _error_response("cmb2_rest_no_boxes", "No boxes found.", status=403)
    base_url = str(request.base_url)
    query = request.url.query
    return {box_id: rest_box(box, NAMESPACE_BASE, base_url, query) for box_id, box in readable.items()}


@app.get(f"/{NAMESPACE_BASE}/{{cmb_id}}")
async def get_box(cmb_id: str, request: Request) -> Any:
    box = boxes.get(cmb_id)
    if box is None or not box.get("show_in_rest"):
        return _error_response("cmb2_rest_box_not_found", "No box found by that id.", "cmb_id", status=404)
    return rest_box(box, NAMESPACE_BASE, str(request.base_url), request.url.query)
