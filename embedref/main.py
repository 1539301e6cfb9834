from __future__ import annotations

import logging

from fastapi import FastAPI
from pydantic import BaseModel

from embedref.app_state import config
from embedref.embed_kinds import EMBED_KINDS, categorize, extract_embed
from embedref.extra_routes import router as extra_router

logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)
app = FastAPI(title="Embed Ref API", version="0.1.0")
app.include_router(extra_router)


@app.on_event("startup")
def startup_log_disabled_kinds() -> None:
    if config.disabled_kinds:
        logger.info("embed kinds disabled=%s", ",".join(sorted(config.disabled_kinds)))


class ClassifyRequest(BaseModel):
    url: str


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/v1/embed-kinds")
def list_embed_kinds() -> dict[str, object]:
    items = [
        {"kind": kind, "enabled": kind not in config.disabled_kinds}
        for kind in EMBED_KINDS
    ]
    return {"items": items}


@app.post("/api/v1/embeds/classify")
def classify_embed(payload: ClassifyRequest) -> dict[str, object]:
    kind = categorize(payload.url)
    enabled = kind is not None and kind not in config.disabled_kinds
    embed = extract_embed(payload.url) if enabled else None
    return {
        "url": payload.url,
        "kind": kind,
        "enabled": enabled,
        "embed": embed.to_payload() if embed else None,
    }
