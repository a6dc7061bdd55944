from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Mapping, Optional, Sequence, Union

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from .schema import EntityResponse

_XML_TYPES = {"application/xml", "text/xml"}
_JSON_TYPES = {"application/json"}
_WILDCARDS = {"*/*", "application/*"}

Payload = Union[EntityResponse, Sequence[EntityResponse]]


def _accept_q(accept: str) -> dict[str, float]:
    """Media type -> highest q value from an Accept header."""
    out: dict[str, float] = {}
    for part in (accept or "").split(","):
        items = [x.strip() for x in part.split(";")]
        media = items[0].lower()
        if not media:
            continue
        q = 1.0
        for p in items[1:]:
            if p.startswith("q="):
                try:
                    q = float(p[2:])
                except ValueError:
                    q = 0.0
        out[media] = max(q, out.get(media, 0.0))
    return out


def wants_xml(request: Request) -> bool:
    """XML only when explicitly asked for and not outranked by JSON or a wildcard."""
    qs = _accept_q(request.headers.get("accept", ""))
    xml_q = max([qs.get(t, 0.0) for t in _XML_TYPES])
    if xml_q <= 0:
        return False
    json_q = max([qs.get(t, 0.0) for t in _JSON_TYPES])
    wildcard_q = max([qs.get(t, 0.0) for t in _WILDCARDS])
    return xml_q > json_q and xml_q >= wildcard_q


def _append_fields(el: ET.Element, data: Mapping[str, Any]) -> None:
    for k, v in data.items():
        child = ET.SubElement(el, k)
        if isinstance(v, bool):
            child.text = "true" if v else "false"
        else:
            child.text = str(v)


def to_xml(payload: Payload, item_tag: str, list_tag: str) -> bytes:
    if isinstance(payload, EntityResponse):
        root = ET.Element(item_tag)
        _append_fields(root, payload.dump())
    else:
        root = ET.Element(list_tag)
        for it in payload:
            _append_fields(ET.SubElement(root, item_tag), it.dump())
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def render(
    request: Request,
    payload: Payload,
    *,
    item_tag: str,
    list_tag: str,
    status_code: int = 200,
    headers: Optional[dict[str, str]] = None,
) -> Response:
    """Render a DTO (or list of DTOs) as JSON, or as XML when the client prefers it."""
    if wants_xml(request):
        return Response(
            content=to_xml(payload, item_tag, list_tag),
            status_code=status_code,
            media_type="application/xml",
            headers=headers,
        )

    if isinstance(payload, EntityResponse):
        content: Any = payload.dump()
    else:
        content = [it.dump() for it in payload]
    return JSONResponse(content=content, status_code=status_code, headers=headers)
