from __future__ import annotations

import re
from typing import Iterable, List
from urllib.parse import quote

WIKI_BASE_URL = "https://palworld.fandom.com/wiki/"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


def title_case(text: str) -> str:
    """'medicine_production' / 'medicineProduction' -> 'Medicine Production'."""
    words = _SEPARATORS.split(_CAMEL_BOUNDARY.sub(" ", text or ""))
    return " ".join(w[:1].upper() + w[1:].lower() for w in words if w)


def wiki_url(name: str) -> str:
    slug = title_case(name).replace(" ", "_")
    return WIKI_BASE_URL + quote(slug, safe="_'")


def format_wiki(name: str) -> str:
    """Markdown link to the wiki page for ``name``."""
    label = title_case(name)
    if not label:
        return ""
    return f"[{label}]({wiki_url(name)})"


def types_label(count: int) -> str:
    return "Type" if count == 1 else "Types"


def suitability_label(count: int) -> str:
    return "Work Suitability" if count == 1 else "Work Suitabilities"


def format_types(types: Iterable[str]) -> str:
    return ", ".join(link for link in (format_wiki(t) for t in types) if link)


def format_suitabilities(suitability) -> str:
    lines: List[str] = []
    for s in suitability:
        link = format_wiki(s.type)
        if link:
            lines.append(f"* {link} {s.level}")
    return "\n".join(lines)


def format_drops(drops: Iterable[str]) -> str:
    return "\n".join(f"* {link}" for link in (format_wiki(d) for d in drops) if link)


def clip(text: str, limit: int) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"
