"""Console survey helpers used when mapping a new firmware build.

:func:`discover_links` walks the console menu to list its pages;
:func:`collect_form_inventory` records every form and field on the settings
pages, which is how the form schemas in :mod:`napalm_ptcl.vendor.ptcl.forms`
were derived.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from urllib.parse import urljoin, urlparse

from napalm_ptcl.client.errors import RouterParseError, TransportError
from napalm_ptcl.client.fetcher import PageFetcher
from napalm_ptcl.parser.fields import PageDocument
from napalm_ptcl.parser.forms import FormInventory, list_forms
from napalm_ptcl.vendor.ptcl.endpoints import ROOT, SETTINGS_PAGES

logger = logging.getLogger(__name__)

_SKIP_PREFIXES: tuple[str, ...] = ("#", "javascript:", "mailto:")


def extract_links(html: str, current_path: str = ROOT) -> list[str]:
    """Return the console paths linked from a page.

    Reads menu anchors (``a.menuLink``), frame and iframe sources and image
    map areas.  Off-device URLs are dropped.
    """
    soup = PageDocument(html).soup
    targets: list[str] = []
    targets += [a.get("href") for a in soup.select("a.menuLink")]
    targets += [f.get("src") for f in soup.find_all(["frame", "iframe"])]
    targets += [a.get("href") for a in soup.find_all("area")]

    paths: list[str] = []
    for target in targets:
        if not target or str(target).lower().startswith(_SKIP_PREFIXES):
            continue
        parsed = urlparse(urljoin(current_path, str(target)))
        if parsed.scheme or parsed.netloc:
            continue
        paths.append(parsed.path or ROOT)
    return paths


def discover_links(
    fetcher: PageFetcher,
    start_path: str = ROOT,
    max_depth: int = 2,
) -> list[str]:
    """Crawl the console from *start_path* and return every linked path.

    Only ``cgi-bin`` pages are followed.  Pages that fail to load are logged
    and skipped.

    Args:
        fetcher: Page fetcher bound to the session.
        start_path: First page to load.
        max_depth: Link hops to follow from *start_path*.

    Returns:
        Sorted unique paths.

    Raises:
        SessionExpiredError: If the session is rejected mid-crawl.
    """
    visited: set[str] = set()
    found: set[str] = set()

    def crawl(path: str, depth: int) -> None:
        if depth > max_depth or path in visited:
            return
        visited.add(path)
        try:
            html = fetcher.fetch(path)
        except TransportError as exc:
            logger.warning("Skipped %s: %s", path, exc)
            return
        for link in extract_links(html, path):
            found.add(link)
            if "cgi-bin" in link and link not in visited:
                crawl(link, depth + 1)

    crawl(start_path, 0)
    return sorted(found)


def collect_form_inventory(
    fetcher: PageFetcher,
    pages: Iterable[str] = SETTINGS_PAGES,
) -> dict[str, list[FormInventory]]:
    """Record the forms of each page in *pages*.

    Returns:
        ``{path: [FormInventory, ...]}``; pages that failed to load are
        absent.

    Raises:
        SessionExpiredError: If the session is rejected.
    """
    inventory: dict[str, list[FormInventory]] = {}
    for path in pages:
        try:
            inventory[path] = list_forms(fetcher.fetch(path))
        except (TransportError, RouterParseError) as exc:
            logger.warning("Skipped %s: %s", path, exc)
    return inventory
