from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from embedref.app_state import config
from embedref.chart_spec import looks_like_chart_spec
from embedref.embed_kinds import EMBED_KINDS, extract_embed, scan_text

router = APIRouter()


class ScanRequest(BaseModel):
    text: str


class ChartSpecRequest(BaseModel):
    code: str


@router.post("/api/v1/embeds/scan")
def scan_message(
    payload: ScanRequest,
    kind: str | None = Query(None, description="only return embeds of this kind"),
) -> dict[str, object]:
    if kind and kind not in EMBED_KINDS:
        raise HTTPException(status_code=400, detail="invalid_kind")

    result = scan_text(
        payload.text,
        max_scan_chars=config.max_scan_chars,
        max_urls=config.max_urls,
    )
    embeds = []
    for item in result["embeds"]:
        if item["kind"] in config.disabled_kinds:
            continue
        if kind and item["kind"] != kind:
            continue
        embed = extract_embed(item["url"])
        embeds.append({**item, "embed": embed.to_payload() if embed else None})

    kinds = [k for k in result["kinds"] if any(e["kind"] == k for e in embeds)]
    return {"embeds": embeds, "kinds": kinds}


@router.post("/api/v1/chart-specs/check")
def check_chart_spec(payload: ChartSpecRequest) -> dict[str, bool]:
    return {"isChartSpec": looks_like_chart_spec(payload.code)}
