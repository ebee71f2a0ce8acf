from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlsplit, urlunsplit

import aiohttp

logger = logging.getLogger("palbot.palworld")

NAMES_PAGE_LIMIT = 200
DEFAULT_TIMEOUT = 20


# -------------------------
# Errors
# -------------------------

class PalError(Exception):
    """Base class for every failure talking to the Pal API."""


class PalNotFound(PalError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No Pal named `{name}` was found")
        self.name = name


class TokenExpired(PalError):
    def __init__(self) -> None:
        super().__init__("Pal API token is expired")


class TransportError(PalError):
    def __init__(self, reason: Any) -> None:
        super().__init__(f"Error fetching from API: `{reason}`")
        self.reason = reason


class UnexpectedStatus(TransportError):
    def __init__(self, status: int) -> None:
        super().__init__(f"Unexpected status code: {status}")
        self.status = status


class PalParseError(PalError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Malformed response from API: {reason}")


# -------------------------
# Response shapes
# -------------------------

def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _int(data: Dict[str, Any], key: str, default: Optional[int] = None) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise PalParseError(f"'{key}' must be an integer")
    return value


@dataclass(frozen=True)
class Suitability:
    type: str
    level: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Suitability":
        return cls(type=_str(data, "type"), level=_int(data, "level", 0))


@dataclass(frozen=True)
class Aura:
    name: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Aura":
        return cls(name=_str(data, "name"), description=_str(data, "description"))


@dataclass(frozen=True)
class Pal:
    id: int
    name: str
    key: str = ""
    image: str = ""
    wiki: str = ""
    types: List[str] = field(default_factory=list)
    image_wiki: str = ""
    suitability: List[Suitability] = field(default_factory=list)
    drops: List[str] = field(default_factory=list)
    aura: Aura = field(default_factory=Aura)
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Pal":
        if not isinstance(data, dict):
            raise PalParseError("Pal entry must be an object")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise PalParseError("Pal entry has no 'name'")

        suitability = data.get("suitability")
        aura = data.get("aura")
        return cls(
            id=_int(data, "id"),
            name=name,
            key=_str(data, "key"),
            image=_str(data, "image"),
            wiki=_str(data, "wiki"),
            types=_str_list(data, "types"),
            image_wiki=_str(data, "imageWiki"),
            suitability=[
                Suitability.from_dict(s) for s in (suitability if isinstance(suitability, list) else [])
                if isinstance(s, dict)
            ],
            drops=_str_list(data, "drops"),
            aura=Aura.from_dict(aura) if isinstance(aura, dict) else Aura(),
            description=_str(data, "description"),
        )


@dataclass(frozen=True)
class APIResponse:
    content: List[Pal]
    page: int = 0
    limit: int = 0
    count: int = 0
    total: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "APIResponse":
        if not isinstance(data, dict):
            raise PalParseError("envelope must be an object")
        content = data.get("content")
        if not isinstance(content, list):
            raise PalParseError("envelope has no 'content' list")
        return cls(
            content=[Pal.from_dict(c) for c in content],
            page=_int(data, "page", 0),
            limit=_int(data, "limit", 0),
            count=_int(data, "count", 0),
            total=_int(data, "total", 0),
        )


# -------------------------
# Client
# -------------------------

def _with_query(base_url: str, query: str) -> str:
    parts = urlsplit(base_url)
    return urlunsplit(parts._replace(query=query))


class PalworldClient:
    """Thin async client for the Pal API. The session is owned by the caller."""

    def __init__(self, session: aiohttp.ClientSession, base_url: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._session = session
        self._base_url = base_url
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_envelope(self, url: str) -> APIResponse:
        logger.debug("GET %s", url)
        try:
            async with self._session.get(url, timeout=self._timeout) as resp:
                if resp.status == 401:
                    raise TokenExpired()
                if resp.status != 200:
                    raise UnexpectedStatus(resp.status)
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise PalParseError(f"invalid JSON ({e})") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(e) from e
        return APIResponse.from_dict(data)

    async def fetch_pal_names(self) -> List[str]:
        """Fetch the first page of Pals and return their names, sorted and unique."""
        envelope = await self._get_envelope(_with_query(self._base_url, f"limit={NAMES_PAGE_LIMIT}"))
        if envelope.total > len(envelope.content):
            logger.warning(
                "Pal API lists %s Pals but only the first %s are loaded",
                envelope.total,
                len(envelope.content),
            )
        return sorted({pal.name.strip() for pal in envelope.content if pal.name.strip()})

    async def get_pal(self, name: str) -> Pal:
        url = _with_query(self._base_url, f"name={quote(name, safe='')}")
        envelope = await self._get_envelope(url)
        if not envelope.content:
            raise PalNotFound(name)
        return envelope.content[0]
