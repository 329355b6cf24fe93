"""PubMed E-utilities search: esearch for ids, then one batched efetch for details."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any

import requests

from errors import SearchError
from models import Article

EUTILS_BASE_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
ARTICLE_URL_TEMPLATE = "https://pubmed.ncbi.nlm.nih.gov/{article_id}/"
REQUEST_TIMEOUT_SECONDS = 30
MAX_DISPLAY_AUTHORS = 3
YEAR_NOT_AVAILABLE = "N/A"

LOGGER = logging.getLogger(__name__)


def search_articles(
    query: str,
    count: int = 5,
    api_key: str | None = None,
    session: requests.Session | None = None,
) -> list[Article]:
    """Search PubMed and return normalized articles in the backend's id order.

    ``query`` should already be in English. Zero hits is a valid empty result.
    Raises SearchError if either network phase fails; no partial list is returned.
    """
    http = session or requests
    ids = _search_ids(http, query=query, count=count, api_key=api_key)
    if not ids:
        LOGGER.info("PubMed search: no ids for query=%r", query)
        return []

    xml_text = _fetch_details(http, ids=ids, api_key=api_key)
    articles = parse_articles_xml(xml_text)

    order = {article_id: index for index, article_id in enumerate(ids)}
    articles.sort(key=lambda a: order.get(a.article_id, len(order)))

    LOGGER.info(
        "PubMed search: query=%r ids=%s parsed=%s",
        query,
        len(ids),
        len(articles),
    )
    return articles


def _search_ids(http: Any, query: str, count: int, api_key: str | None) -> list[str]:
    params: dict[str, Any] = {
        "db": "pubmed",
        "term": query,
        "retmax": count,
        "retmode": "json",
    }
    if api_key:
        params["api_key"] = api_key

    try:
        response = http.get(
            f"{EUTILS_BASE_URL}/esearch.fcgi",
            params=params,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("PubMed esearch failed for query=%r: %s", query, exc)
        raise SearchError("PubMed search failed") from exc

    body = body if isinstance(body, dict) else {}
    result = body.get("esearchresult")
    if not isinstance(result, dict):
        result = {}
    error = body.get("ERROR") or result.get("ERROR")
    if error:
        LOGGER.warning("PubMed esearch reported an error for query=%r: %s", query, error)

    idlist = result.get("idlist")
    if not isinstance(idlist, list):
        return []
    return [str(item) for item in idlist if str(item).strip()]


def _fetch_details(http: Any, ids: list[str], api_key: str | None) -> str:
    params: dict[str, Any] = {
        "db": "pubmed",
        "id": ",".join(ids),
        "retmode": "xml",
    }
    if api_key:
        params["api_key"] = api_key

    try:
        response = http.get(
            f"{EUTILS_BASE_URL}/efetch.fcgi",
            params=params,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        LOGGER.warning("PubMed efetch failed for %s ids: %s", len(ids), exc)
        raise SearchError("PubMed detail fetch failed") from exc

    return response.text


def parse_articles_xml(xml_text: str) -> list[Article]:
    """Parse an efetch PubmedArticleSet into articles.

    Parsing is per-article tolerant: missing fields take their defaults and a
    block without a PMID is skipped without affecting its siblings.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        LOGGER.warning("PubMed efetch returned malformed XML: %s", exc)
        return []

    articles: list[Article] = []
    for element in root.iter("PubmedArticle"):
        article = _parse_article(element)
        if article is None:
            LOGGER.warning("Skipping PubmedArticle without PMID")
            continue
        articles.append(article)
    return articles


def _parse_article(element: ET.Element) -> Article | None:
    medline = element.find("MedlineCitation")
    if medline is None:
        return None

    article_id = _text(medline.find("PMID"))
    if not article_id:
        return None

    data = medline.find("Article")
    return Article(
        article_id=article_id,
        title=_text(data.find("ArticleTitle")) if data is not None else "",
        authors=_authors(data),
        journal=_text(data.find("Journal/Title")) if data is not None else "",
        year=_year(data),
        abstract=_abstract(data),
        url=ARTICLE_URL_TEMPLATE.format(article_id=article_id),
    )


def _authors(data: ET.Element | None) -> tuple[str, ...]:
    if data is None:
        return ()

    names: list[str] = []
    for author in data.iterfind("AuthorList/Author"):
        name = " ".join(
            part for part in (_text(author.find("LastName")), _text(author.find("Initials"))) if part
        ) or _text(author.find("CollectiveName"))
        if name:
            names.append(name)
        if len(names) == MAX_DISPLAY_AUTHORS:
            break
    return tuple(names)


def _year(data: ET.Element | None) -> str:
    if data is None:
        return YEAR_NOT_AVAILABLE
    pub_date = data.find("Journal/JournalIssue/PubDate")
    if pub_date is None:
        return YEAR_NOT_AVAILABLE
    return _text(pub_date.find("Year")) or _text(pub_date.find("MedlineDate")) or YEAR_NOT_AVAILABLE


def _abstract(data: ET.Element | None) -> str:
    if data is None:
        return ""

    sections: list[str] = []
    for node in data.iterfind("Abstract/AbstractText"):
        content = _text(node)
        label = (node.get("Label") or "").strip()
        sections.append(f"**{label}**: {content}" if label else content)
    return "\n\n".join(sections)


def _text(node: ET.Element | None) -> str:
    # itertext keeps inline markup such as <i> or <sup> inside titles and abstracts
    if node is None:
        return ""
    return "".join(node.itertext()).strip()
