"""HTTP endpoint that strips attributes from posted C# source."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from litestar import Litestar, get, post
from litestar.exceptions import ValidationException
from litestar.status_codes import HTTP_200_OK

from attrstrip import DEFAULT_ATTRIBUTE, check_attribute_name, rewrite

# Load .env from service/ or repo root if present
_env_file = Path(__file__).parent / ".env"
if not _env_file.is_file():
    _env_file = Path(__file__).parent.parent / ".env"
if _env_file.is_file():
    for line in _env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            key, _, value = line.partition("=")
            os.environ.setdefault(key.strip(), value.strip())

ATTRIBUTE = os.environ.get("ATTRSTRIP_ATTRIBUTE", DEFAULT_ATTRIBUTE)
COLLAPSE_BLANK_LINES = os.environ.get("ATTRSTRIP_COLLAPSE_BLANK_LINES", "1").lower() not in ("0", "false", "no")


@dataclass
class RewriteRequest:
    content: str
    attribute: str | None = None
    collapse_blank_lines: bool | None = None


@dataclass
class RewriteResponse:
    content: str
    removed: int


@get("/_health/")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@post("/rewrite", status_code=HTTP_200_OK)
async def rewrite_source(data: RewriteRequest) -> RewriteResponse:
    attribute = data.attribute if data.attribute is not None else ATTRIBUTE
    collapse = data.collapse_blank_lines if data.collapse_blank_lines is not None else COLLAPSE_BLANK_LINES
    try:
        check_attribute_name(attribute)
    except ValueError as exc:
        raise ValidationException(detail=str(exc)) from exc
    content, removed = rewrite(data.content, attribute, collapse_blank_lines=collapse)
    return RewriteResponse(content=content, removed=removed)


app = Litestar(route_handlers=[health, rewrite_source])
