"""
iCloud shortcut fetcher.

Given iCloud shortcut links, fetches the CloudKit record (name, icon,
asset URLs) and optionally downloads the unsigned shortcut plist and
decodes its actions.

    https://www.icloud.com/shortcuts/86cd1eeabddc44188607238acd4cc7ef
      → https://www.icloud.com/shortcuts/api/records/86cd1eeabddc44188607238acd4cc7ef
      → fields.shortcut.value.downloadURL  ("...${f}" → "...shortcut.plist")

Also loads ShortcutData lists from the snake_case JSON format used to ship
pre-fetched shortcut metadata with an app.

HTTP goes through an `opener` callable so tests (and callers with their
own HTTP stack) can replace urllib.
"""

from __future__ import annotations

import asyncio
import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence
from urllib.parse import urlparse

from config import SummarizerConfig
from errors import (
    DecodingFailed,
    InvalidResponse,
    InvalidURL,
    NetworkError,
    ResourceNotFound,
    ShortcutError,
)
from glyphs import symbol_for
from workflow_action import WorkflowAction
from workflow_decoder import decode_workflow

API_RECORDS_PATH = "/api/records/"
API_RECORDS_URL = "https://www.icloud.com/shortcuts/api/records/{id}"
SHORTCUT_LINK_URL = "https://www.icloud.com/shortcuts/{id}"
ASSET_FILENAME_PLACEHOLDER = "${f}"
ASSET_FILENAME = "shortcut.plist"

log = logging.getLogger(__name__)

# (url, timeout_s, user_agent) → (status_code, body)
Opener = Callable[[str, float, str], tuple[int, bytes]]


# =============================================================================
# LINK HELPERS
# =============================================================================


def extract_shortcut_id(link: str) -> str | None:
    """
    Pull the record ID out of an iCloud link, an API records URL, or a bare ID.

    "https://www.icloud.com/shortcuts/abc123"             → "abc123"
    "https://www.icloud.com/shortcuts/api/records/abc123" → "abc123"
    "abc123"                                              → "abc123"
    """
    link = link.strip()
    if not link:
        return None
    if "icloud.com" not in link and "/" not in link:
        return link

    path = urlparse(link).path if "://" in link else link
    if API_RECORDS_PATH in path:
        shortcut_id = path.split(API_RECORDS_PATH)[-1]
    else:
        parts = [p for p in path.split("/") if p and p != "shortcuts" and "icloud.com" not in p]
        shortcut_id = parts[-1] if parts else ""
    shortcut_id = shortcut_id.strip("/")
    return shortcut_id or None


def normalize_shortcut_link(link: str) -> str:
    """Rewrite API records URLs to the public share link; others pass through."""
    if API_RECORDS_PATH in link:
        shortcut_id = extract_shortcut_id(link)
        if shortcut_id:
            return SHORTCUT_LINK_URL.format(id=shortcut_id)
    return link


def construct_asset_url(template_url: str | None) -> str | None:
    """CloudKit asset URLs carry a ${f} filename placeholder."""
    if template_url is None:
        return None
    return template_url.replace(ASSET_FILENAME_PLACEHOLDER, ASSET_FILENAME)


# =============================================================================
# SHORTCUT METADATA
# =============================================================================


@dataclass(frozen=True)
class ShortcutData:
    """Metadata for one shared shortcut."""

    id: str
    name: str
    icon_color: int
    icon_glyph: int
    icloud_link: str
    icon_url: str | None = None
    shortcut_url: str | None = None

    @property
    def icon(self) -> str | None:
        """SF Symbol for the shortcut's glyph, if known."""
        return symbol_for(self.icon_glyph)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "icon_color": self.icon_color,
            "icon_glyph": self.icon_glyph,
            "i_cloud_link": self.icloud_link,
        }
        if self.icon_url is not None:
            result["icon_url"] = self.icon_url
        if self.shortcut_url is not None:
            result["shortcut_url"] = self.shortcut_url
        return result

    @classmethod
    def from_dict(cls, data: Any) -> "ShortcutData":
        if not isinstance(data, dict):
            raise DecodingFailed(TypeError(f"expected an object, got {type(data).__name__}"))
        try:
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                icon_color=int(data["icon_color"]),
                icon_glyph=int(data["icon_glyph"]),
                icloud_link=str(data["i_cloud_link"]),
                icon_url=data.get("icon_url"),
                shortcut_url=data.get("shortcut_url"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodingFailed(e) from e


def load_shortcut_data(data: bytes | str) -> list[ShortcutData]:
    """Load shortcuts from JSON. Accepts either a single object or an array."""
    try:
        parsed = json.loads(data)
    except ValueError as e:
        raise DecodingFailed(e) from e
    if isinstance(parsed, list):
        return [ShortcutData.from_dict(item) for item in parsed]
    return [ShortcutData.from_dict(parsed)]


def load_shortcut_data_file(filepath: str | Path) -> list[ShortcutData]:
    path = Path(filepath)
    if not path.exists():
        raise ResourceNotFound(str(path))
    return load_shortcut_data(path.read_bytes())


def shortcut_data_from_record(record: Any, icloud_link: str) -> ShortcutData:
    """Build ShortcutData from a CloudKit records API response."""
    try:
        fields = record["fields"]
        icon = fields.get("icon") or {}
        shortcut = fields.get("shortcut") or {}
        return ShortcutData(
            id=str(record["recordName"]),
            name=str(fields["name"]["value"]),
            icon_color=int(fields["icon_color"]["value"]),
            icon_glyph=int(fields["icon_glyph"]["value"]),
            icloud_link=normalize_shortcut_link(icloud_link),
            icon_url=(icon.get("value") or {}).get("downloadURL"),
            shortcut_url=construct_asset_url((shortcut.get("value") or {}).get("downloadURL")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DecodingFailed(e) from e


@dataclass
class FetchedShortcut:
    """Metadata plus (optionally) the decoded action list."""

    data: ShortcutData
    actions: list[WorkflowAction] | None = field(default=None)

    def to_dict(self) -> dict[str, Any]:
        result = self.data.to_dict()
        if self.actions is not None:
            result["actions"] = [a.to_dict() for a in self.actions]
        return result


# =============================================================================
# HTTP
# =============================================================================


def urllib_opener(url: str, timeout_s: float, user_agent: str) -> tuple[int, bytes]:
    """Default opener: GET via urllib. HTTP error statuses are returned, not raised."""
    req = urllib.request.Request(url, headers={"User-Agent": user_agent})
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            return resp.status, resp.read()
    except urllib.error.HTTPError as e:
        with e:
            return e.code, b""


class ShortcutService:
    """Fetches shortcut metadata and actions from iCloud."""

    def __init__(self, config: SummarizerConfig | None = None, opener: Opener | None = None):
        self.config = config or SummarizerConfig()
        self._opener = opener or urllib_opener

    def _get(self, url: str) -> bytes:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidURL(url)
        try:
            status, body = self._opener(url, self.config.timeout_s, self.config.user_agent)
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise NetworkError(e) from e
        if status == 404:
            raise ResourceNotFound(url)
        if status != 200:
            raise InvalidResponse(status)
        return body

    def fetch_metadata(self, icloud_link: str) -> ShortcutData:
        shortcut_id = extract_shortcut_id(icloud_link)
        if not shortcut_id:
            raise InvalidURL(icloud_link)
        log.debug("Fetching record %s", shortcut_id)
        body = self._get(API_RECORDS_URL.format(id=shortcut_id))
        try:
            record = json.loads(body)
        except ValueError as e:
            raise DecodingFailed(e) from e
        if "/" not in icloud_link:
            icloud_link = SHORTCUT_LINK_URL.format(id=shortcut_id)
        return shortcut_data_from_record(record, icloud_link)

    def fetch_workflow_actions(self, shortcut_url: str) -> list[WorkflowAction]:
        """Download the unsigned shortcut plist and decode it.

        Raises ParsingFailed if the download isn't a readable plist.
        """
        log.debug("Downloading workflow from %s", shortcut_url)
        return decode_workflow(self._get(shortcut_url), self.config)

    def fetch_shortcut(self, icloud_link: str, with_actions: bool = False) -> FetchedShortcut:
        data = self.fetch_metadata(icloud_link)
        actions = None
        if with_actions and data.shortcut_url:
            actions = self.fetch_workflow_actions(data.shortcut_url)
        return FetchedShortcut(data=data, actions=actions)

    async def fetch_all(
        self, links: Sequence[str], with_actions: bool = False
    ) -> list[FetchedShortcut | ShortcutError]:
        """Fetch several shortcuts concurrently.

        The result list lines up with `links`. A failed fetch leaves its
        ShortcutError in that slot and does not affect the others.
        """
        loop = asyncio.get_running_loop()
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def fetch_one(link: str) -> FetchedShortcut | ShortcutError:
            async with semaphore:
                try:
                    return await loop.run_in_executor(
                        None, self.fetch_shortcut, link, with_actions
                    )
                except ShortcutError as e:
                    log.warning("[%s] Fetch failed: %s", link, e)
                    return e
                except Exception as e:
                    log.warning("[%s] Fetch failed: %s", link, e, exc_info=True)
                    return NetworkError(e)

        return list(await asyncio.gather(*(fetch_one(link) for link in links)))

    def fetch_all_sync(
        self, links: Sequence[str], with_actions: bool = False
    ) -> list[FetchedShortcut | ShortcutError]:
        return asyncio.run(self.fetch_all(links, with_actions))
