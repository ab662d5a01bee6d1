"""WordPress REST API client for page lookup, creation and update."""

import base64
import logging
from typing import Any, List, NamedTuple, Optional

import httpx
from bs4 import BeautifulSoup

from sitejob import config
from sitejob.config import WpCredentials

logger = logging.getLogger(__name__)

_PAGES_PATH = "/wp-json/wp/v2/pages"


class WordPressError(RuntimeError):
    """The WordPress API answered with an error status or an unreadable body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemotePage(NamedTuple):
    id: int
    link: str
    slug: str
    status: str


class RemotePageSummary(NamedTuple):
    id: int
    title: str
    slug: str
    url: str
    status: str


def basic_auth_header(username: str, app_password: str) -> str:
    """Return the ``Authorization`` value for a WordPress application password."""
    token = base64.b64encode(f"{username}:{app_password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def _strip_html(value: str) -> str:
    """Plain text of a ``*.rendered`` field (tags removed, entities decoded)."""
    if not value:
        return ""
    return BeautifulSoup(value, "lxml").get_text(strip=True)


def _json_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _error_message(data: Any, resp: httpx.Response) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.text[:200]


def _to_remote_page(data: Any) -> RemotePage:
    try:
        return RemotePage(
            id=int(data["id"]),
            link=str(data.get("link", "")),
            slug=str(data.get("slug", "")),
            status=str(data.get("status", "")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise WordPressError(f"Unexpected page payload from WordPress: {exc}") from exc


class WordPressClient:
    """Thin async wrapper around the ``wp/v2/pages`` endpoints of one site.

    Use as an async context manager so the underlying connection pool is
    closed::

        async with WordPressClient(creds) as wp:
            page_id = await wp.get_page_id_by_slug("about")
    """

    def __init__(
        self,
        credentials: WpCredentials,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = credentials.base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.WP_API_TIMEOUT,
            follow_redirects=True,
            headers={
                "Authorization": basic_auth_header(credentials.username, credentials.app_password),
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self) -> "WordPressClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_page_id_by_slug(self, slug: str) -> Optional[int]:
        """Return the id of the page with *slug*, or *None* when there is none.

        ``status=any`` makes drafts and private pages visible too; staging
        sites usually keep pages as drafts.
        """
        resp = await self._client.get(
            _PAGES_PATH,
            params={"slug": slug, "status": "any", "per_page": 1},
        )
        data = _json_body(resp)
        if resp.status_code != 200:
            raise WordPressError(
                f'WP API error looking up slug "{slug}" ({resp.status_code}): {_error_message(data, resp)}',
                resp.status_code,
            )
        if not isinstance(data, list):
            raise WordPressError(f'Unexpected response looking up slug "{slug}": expected a list.')
        if not data:
            return None
        return _to_remote_page(data[0]).id

    async def create_page(self, title: str, slug: str, content: str, status: str = "draft") -> RemotePage:
        resp = await self._client.post(
            _PAGES_PATH,
            json={"title": title, "slug": slug, "status": status, "content": content},
        )
        data = _json_body(resp)
        if not resp.is_success:
            raise WordPressError(
                f"WP create page failed ({resp.status_code}): {_error_message(data, resp)}",
                resp.status_code,
            )
        return _to_remote_page(data)

    async def update_page(self, page_id: int, title: str, content: str) -> RemotePage:
        resp = await self._client.post(
            f"{_PAGES_PATH}/{page_id}",
            json={"title": title, "content": content},
        )
        data = _json_body(resp)
        if not resp.is_success:
            raise WordPressError(
                f"WP update page failed ({resp.status_code}): {_error_message(data, resp)}",
                resp.status_code,
            )
        return _to_remote_page(data)

    async def list_pages(self) -> List[RemotePageSummary]:
        """Return every page of the site, drafts and private pages included."""
        results: List[RemotePageSummary] = []
        page = 1

        while True:
            resp = await self._client.get(
                _PAGES_PATH,
                params={
                    "per_page": config.WP_PAGE_SIZE,
                    "page": page,
                    "orderby": "title",
                    "order": "asc",
                    "status": "any",
                },
            )
            data = _json_body(resp)
            if resp.status_code != 200:
                raise WordPressError(
                    f"WP API error fetching pages ({resp.status_code}): {_error_message(data, resp)}",
                    resp.status_code,
                )
            if not isinstance(data, list):
                raise WordPressError("Unexpected response fetching pages: expected a list.")

            for row in data:
                try:
                    results.append(
                        RemotePageSummary(
                            id=int(row["id"]),
                            title=_strip_html((row.get("title") or {}).get("rendered", "")),
                            slug=str(row.get("slug", "")),
                            url=str(row.get("link", "")),
                            status=str(row.get("status", "")),
                        )
                    )
                except (KeyError, TypeError, ValueError, AttributeError) as exc:
                    logger.warning("Skipping unreadable WP page row on page %d: %s", page, exc)

            # A short page is the last page of results
            if len(data) < config.WP_PAGE_SIZE:
                break
            page += 1

        return results
