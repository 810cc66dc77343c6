"""
HTML document adapter.

Turns saved pages or fetched responses into detached BeautifulSoup
documents and provides the small set of DOM queries the extractors need.
Extractors never talk to the network or the filesystem themselves; they
receive an already-parsed document from here.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Tuple, Union

import requests
from bs4 import BeautifulSoup, Tag

from ..exceptions import ContainerNotFoundError, FetchError
from ..logger import get_logger
from .text import clean_text, strip_label

logger = get_logger(__name__)

LABEL_TAGS = ["td", "th", "label", "span", "div", "b", "strong"]
SECTION_TAGS = ("thead", "tbody", "tfoot")
HANDLER_ARG_RE = re.compile(r"""['"]([^'"]*)['"]""")
PLACEHOLDER_OPTION_RE = re.compile(r"select", re.IGNORECASE)


def parse_html(markup: Union[str, bytes]) -> BeautifulSoup:
    """Parse markup into a detached document."""
    return BeautifulSoup(markup, "html.parser")


def is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def load_document(
    source: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Tuple[BeautifulSoup, str]:
    """
    Load a page from a URL or a saved HTML file.

    Args:
        source: http(s) URL or path to an .html file
        session: Optional requests session (for cookies / connection reuse)
        timeout: Optional request timeout in seconds

    Returns:
        Tuple of (document, base_url). For files, base_url is the file URI.

    Raises:
        FetchError: If the URL cannot be fetched or the file does not exist
    """
    if is_url(source):
        http = session or requests.Session()
        try:
            response = http.get(source, timeout=timeout)
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch page: {e}", url=source)
        if not response.ok:
            raise FetchError(
                f"Page returned HTTP {response.status_code}",
                url=source,
                status_code=response.status_code,
            )
        logger.debug(f"Fetched {source} ({len(response.content)} bytes)")
        return parse_html(response.content), response.url or source

    path = Path(source)
    if not path.is_file():
        raise FetchError(f"HTML file not found: {source}", url=str(path))
    return parse_html(path.read_bytes()), path.resolve().as_uri()


def require_one(doc: Union[BeautifulSoup, Tag], selector: str, description: str) -> Tag:
    """
    Return the first node matching a CSS selector.

    Raises:
        ContainerNotFoundError: If nothing matches
    """
    node = doc.select_one(selector)
    if node is None:
        raise ContainerNotFoundError(f"Could not find {description} on this page.", selector=selector)
    return node


def table_rows(table: Tag) -> List[Tag]:
    """
    Rows that belong to this table, in document order.

    Rows of nested tables are excluded; rows inside thead/tbody/tfoot are
    included.
    """
    rows: List[Tag] = []
    for child in table.find_all(recursive=False):
        if child.name == "tr":
            rows.append(child)
        elif child.name in SECTION_TAGS:
            rows.extend(child.find_all("tr", recursive=False))
    return rows


def body_rows(table: Tag) -> List[Tag]:
    """Rows of the table outside its thead."""
    return [row for row in table_rows(table) if row.parent.name != "thead"]


def cells(row: Tag, name: Union[str, Iterable[str]] = "td") -> List[Tag]:
    """The row's own cells."""
    return row.find_all(name, recursive=False)


def node_text(node: Optional[Tag]) -> str:
    """Normalized text of a node ('' for None)."""
    if node is None:
        return ""
    return clean_text(node.get_text(" "))


def handler_param(node: Tag, name: str) -> Optional[str]:
    """
    Value of a `name=<digits>` query parameter in an inline onclick handler.

    Looks at the node itself and, failing that, at descendant inputs whose
    handler mentions the parameter.
    """
    pattern = re.compile(rf"[?&]{re.escape(name)}=(\d+)")
    candidates = [node] if node.has_attr("onclick") else []
    candidates += node.select(f'[onclick*="{name}="]')
    for candidate in candidates:
        match = pattern.search(candidate.get("onclick", ""))
        if match:
            return match.group(1)
    return None


def handler_args(onclick: str, function: str) -> Optional[List[str]]:
    """
    Quoted arguments of a `function('a', 'b', ...)` call inside a handler.

    Returns None when the handler does not call the function.
    """
    match = re.search(rf"{re.escape(function)}\s*\(([^)]*)\)", onclick or "")
    if not match:
        return None
    return [arg.strip() for arg in HANDLER_ARG_RE.findall(match.group(1))]


def selected_option_text(doc: BeautifulSoup, hints: Iterable[str]) -> str:
    """
    Text of the selected option in the first <select> whose id/name matches a hint.

    Placeholder options ("-- Select --") are ignored. Without an explicit
    `selected` attribute the first option is the selected one.
    """
    hints = [h.lower() for h in hints]
    for select in doc.find_all("select"):
        id_name = f"{select.get('id', '')} {select.get('name', '')}".lower()
        if not any(hint in id_name for hint in hints):
            continue
        option = select.find("option", selected=True) or select.find("option")
        text = node_text(option)
        if text and not PLACEHOLDER_OPTION_RE.search(text):
            return text
    return ""


def label_value_text(doc: BeautifulSoup, pattern: Pattern[str]) -> str:
    """
    Value rendered next to a label such as "District" or "Municipality".

    Returns the next sibling element's text (minus a leading ':'), or the
    inline text after the first ':' in the label element itself.
    """
    for element in doc.find_all(LABEL_TAGS):
        text = node_text(element)
        if not pattern.search(text):
            continue
        sibling = element.find_next_sibling()
        if sibling is not None:
            value = strip_label(node_text(sibling))
            if value:
                return value
        inline = clean_text(":".join(text.split(":")[1:]))
        if inline:
            return inline
    return ""
