"""
Document fetching (URL -> decoded tree).

- Downloads catalog XML documents with requests
- Decodes them with BeautifulSoup's XML builder into plain dicts/lists/scalars
- Only well-formed documents are decoded (checked with a strict lxml parse first)
- Never raises on transport or decode problems: logs the URL and returns None

Decoded layout:
- root element           -> {"<root tag>": node}
- element with attributes or child elements -> dict
  (attributes and children share the dict, direct text goes to "text")
- element with only text -> the typed text itself
- empty element          -> None
- repeated child tag     -> list; a single child stays a bare value

Namespace prefixes are dropped from tag and attribute names.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import requests
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from bs4.element import CData, NavigableString, PreformattedString, Tag
from loguru import logger
from lxml import etree

from catalogflat.config import BASE_URL, HTTP_TIMEOUT


# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

SCHEDULE_URL = f"{BASE_URL}/schedule.xml?mode=summary"

_TERM_SPEC_RE = re.compile(r"([0-9]{4})[/ _-]([A-Za-z]+)")

# A fetch callable: url -> decoded tree, or None if it could not be fetched
Fetch = Callable[[str], Optional[Dict[str, Any]]]


def term_url(spec: str) -> str:
    """
    Resolve a term spec to the URL of its root document.

    Accepts a full URL, or "YEAR/term" (e.g. "2020/spring").
    """
    spec = spec.strip()
    if spec.startswith(("http://", "https://")):
        return spec
    match = _TERM_SPEC_RE.fullmatch(spec)
    if not match:
        raise ValueError(f"Invalid term: {spec!r} (expected a URL or YEAR/term, e.g. 2020/spring)")
    year, term = match.groups()
    return f"{BASE_URL}/schedule/{year}/{term.lower()}.xml"


def cascade_url(href: str) -> str:
    """
    Return the subject URL in cascade mode (courses with all nested sections).
    """
    parts = urlsplit(href)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k != "mode"]
    query.append(("mode", "cascade"))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


# ---------------------------------------------------------------------------
# XML decoding
# ---------------------------------------------------------------------------

_INT_RE = re.compile(r"-?(0|[1-9][0-9]*)")
_FLOAT_RE = re.compile(r"-?(0|[1-9][0-9]*)\.[0-9]+")


def _local(name: str) -> str:
    return name.split(":")[-1]


def _typed(value: Any) -> Any:
    """
    Canonical numbers become int/float; everything else stays text.

    Leading zeros ("0100") are kept as text so codes are not mangled.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if _INT_RE.fullmatch(text):
        return int(text)
    if _FLOAT_RE.fullmatch(text):
        return float(text)
    return text


def _is_text(item: Any) -> bool:
    # comments, processing instructions etc. are PreformattedStrings too
    if isinstance(item, CData):
        return True
    return isinstance(item, NavigableString) and not isinstance(item, PreformattedString)


def _element_to_node(element: Tag) -> Any:
    node: Dict[str, Any] = {}

    for name, value in element.attrs.items():
        name = str(name)
        if name == "xmlns" or name.startswith("xmlns:"):
            continue
        node[_local(name)] = _typed(value)

    texts = []
    for item in element.children:
        if isinstance(item, Tag):
            key = _local(item.name)
            value = _element_to_node(item)
            if key not in node:
                node[key] = value
            elif isinstance(node[key], list):
                node[key].append(value)
            else:
                node[key] = [node[key], value]
        elif _is_text(item):
            texts.append(str(item))

    text = "".join(texts).strip()
    if not node:
        return _typed(text) if text else None
    if text:
        node["text"] = _typed(text)
    return node


def _well_formed(markup: str | bytes) -> bool:
    # BeautifulSoup's XML builder recovers from broken markup, lxml's own parser does not
    data = markup.encode("utf-8") if isinstance(markup, str) else markup
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        etree.fromstring(data, parser=parser)
    except (etree.XMLSyntaxError, ValueError):
        return False
    return True


def xml_to_tree(markup: str | bytes) -> Optional[Dict[str, Any]]:
    """
    Decode an XML document into {root_tag: node}.

    Returns None if the markup is not a well-formed document (truncated,
    empty, or not XML at all).
    """
    if not _well_formed(markup):
        return None

    try:
        soup = BeautifulSoup(markup, "xml")
    except ParserRejectedMarkup:
        return None

    root = next((item for item in soup.children if isinstance(item, Tag)), None)
    if root is None:
        return None
    return {_local(root.name): _element_to_node(root)}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def fetch_tree(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = HTTP_TIMEOUT,
) -> Optional[Dict[str, Any]]:
    """
    Fetch one catalog document and decode it.

    Returns None (and logs the URL) on any transport or decode failure.
    """
    getter = session if session is not None else requests
    try:
        resp = getter.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Fetch failed for {}: {}", url, exc)
        return None

    tree = xml_to_tree(resp.content)
    if tree is None:
        logger.warning("Malformed or empty XML document from {}", url)
        return None

    logger.debug("Fetched {}", url)
    return tree
