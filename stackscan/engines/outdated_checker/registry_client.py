"""Package registry lookups — npm, NuGet, PyPI and RubyGems."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx
import structlog

log = structlog.get_logger("stackscan.engine")

DEFAULT_TIMEOUT = 10.0


def _npm_url(name: str) -> str:
    # scoped packages: @types/node -> @types%2Fnode
    return f"https://registry.npmjs.org/{quote(name, safe='@')}/latest"


def _nuget_url(name: str) -> str:
    return f"https://api.nuget.org/v3-flatcontainer/{quote(name.lower(), safe='')}/index.json"


def _pypi_url(name: str) -> str:
    return f"https://pypi.org/pypi/{quote(name, safe='')}/json"


def _rubygems_url(name: str) -> str:
    return f"https://rubygems.org/api/v1/versions/{quote(name, safe='')}/latest.json"


def _top_level_version(payload: Any) -> str | None:
    if isinstance(payload, dict) and isinstance(payload.get("version"), str):
        return payload["version"]
    return None


def _last_listed_version(payload: Any) -> str | None:
    """NuGet flat-container lists versions in ascending order."""
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        return None
    versions = [v for v in payload["versions"] if isinstance(v, str) and v.strip()]
    return versions[-1] if versions else None


def _pypi_info_version(payload: Any) -> str | None:
    info = payload.get("info") if isinstance(payload, dict) else None
    return _top_level_version(info)


@dataclass(frozen=True)
class _Endpoint:
    url: Callable[[str], str]
    extract: Callable[[Any], str | None]


_ENDPOINTS: dict[str, _Endpoint] = {
    "npm": _Endpoint(_npm_url, _top_level_version),
    "nuget": _Endpoint(_nuget_url, _last_listed_version),
    "pip": _Endpoint(_pypi_url, _pypi_info_version),
    "gem": _Endpoint(_rubygems_url, _top_level_version),
}

SUPPORTED_ECOSYSTEMS = frozenset(_ENDPOINTS)


@dataclass(frozen=True)
class RegistryQuery:
    """One latest-version lookup: which registry, which package."""

    ecosystem: str
    package: str

    def __post_init__(self) -> None:
        if self.ecosystem not in _ENDPOINTS:
            raise ValueError(f"unsupported ecosystem: {self.ecosystem!r}")

    @property
    def url(self) -> str:
        return _ENDPOINTS[self.ecosystem].url(self.package)

    def extract_version(self, payload: Any) -> str | None:
        return _ENDPOINTS[self.ecosystem].extract(payload)


class RegistryClient:
    """Thin async wrapper around ``httpx.AsyncClient`` for registry JSON APIs."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            headers={"Accept": "application/json", "User-Agent": "stackscan"},
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> RegistryClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def get_json(self, url: str, timeout: float | None = None) -> Any | None:
        """GET *url* and return the decoded JSON body.

        Returns None for non-2xx responses (unknown package, registry
        hiccup). Transport errors propagate as ``httpx.HTTPError``; an
        undecodable body raises ``ValueError``.
        """
        resp = await self._client.get(url, timeout=timeout or self._timeout)
        if not resp.is_success:
            log.debug("registry.non_success", url=url, status=resp.status_code)
            return None
        return resp.json()

    async def latest_version(self, query: RegistryQuery, timeout: float | None = None) -> str | None:
        payload = await self.get_json(query.url, timeout)
        if payload is None:
            return None
        return query.extract_version(payload)
