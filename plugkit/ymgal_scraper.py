"""Scraping of galgame picture sets and the commands that query them."""

from __future__ import annotations

import re
import threading
import time
from urllib.parse import quote_plus

import lxml.html
import requests

from plugkit.ymgal_db import Ymgal, YmgalDB

WEB_URL = "https://www.ymgal.com"
CG_TYPE = "Gal CG"
EMOTICON_TYPE = "其他"
WEB_PIC_URL = WEB_URL + "/co/picset/"

_SEARCH_PREFIX = WEB_URL + "/search?type=picset&sort=default&category="
_PAGE_NUMBER_XPATH = (
    "//*[@id='pager-box']/div/a[@class='icon item pager-next']"
    "/preceding-sibling::a[1]/text()"
)
_PICSET_LINK_XPATH = "//*[@id='picset-result-list']/ul/div/div[1]/a"
_PICTURE_COUNT_XPATH = (
    "//div[@class='meta-info']/div[@class='meta-right']/span[2]/text()"
)
_CG_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[2]/div"
    "/div[@class='swiper-wrapper']/div[{}]"
)
_EMOTICON_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[@class='stream-list']/div[{}]/img"
)
_NUMBER = re.compile(r"\d+")
_RANDOM_COMMAND = re.compile(r"^随机gal(CG|表情包)$")
_SEARCH_COMMAND = re.compile(r"^gal(CG|表情包)([一-龥ぁ-んァ-ヶA-Za-z0-9]{1,25})$")


def _type_of(word: str) -> str:
    return EMOTICON_TYPE if word == "表情包" else CG_TYPE


def search_url(picture_type: str, page: int) -> str:
    """The address of one page of search results for a picture type."""
    if picture_type not in (CG_TYPE, EMOTICON_TYPE):
        raise ValueError(f"unknown picture type: {picture_type!r}")
    return _SEARCH_PREFIX + quote_plus(picture_type) + "&page=" + str(page)


def _find_one(doc, xpath: str):
    found = doc.xpath(xpath)
    if not found:
        raise ValueError(f"nothing found at {xpath}")
    return found[0]


def _attr(element, position: int) -> str:
    values = list(element.attrib.values())
    if len(values) <= position:
        raise ValueError(f"element <{element.tag}> has too few attributes")
    return values[position]


def _number_in(text: str) -> int:
    m = _NUMBER.search(text)
    if m is None:
        raise ValueError(f"no number in {text!r}")
    return int(m.group())


def parse_max_page(html: str) -> int:
    """The number of the last page shown by a search page's pager."""
    text = str(_find_one(lxml.html.fromstring(html), _PAGE_NUMBER_XPATH))
    try:
        return int(text.strip())
    except ValueError as exc:
        raise ValueError(f"bad page number: {text!r}") from exc


def parse_picset_ids(html: str) -> list[str]:
    """The picture set ids listed on a search page, in page order."""
    doc = lxml.html.fromstring(html)
    ids = []
    for link in doc.xpath(_PICSET_LINK_XPATH):
        m = _NUMBER.search(_attr(link, 0))
        ids.append(m.group() if m else "")
    return ids


def parse_picset(html: str, picset_id, picture_type: str) -> Ymgal:
    """Read a picture set page into an entry of the given type."""
    if picture_type == CG_TYPE:
        picture_xpath = _CG_PICTURE_XPATH
    elif picture_type == EMOTICON_TYPE:
        picture_xpath = _EMOTICON_PICTURE_XPATH
    else:
        raise ValueError(f"unknown picture type: {picture_type!r}")
    numeric_id = int(picset_id)
    doc = lxml.html.fromstring(html)
    title = _attr(_find_one(doc, "//meta[@name='name']"), 1)
    description = _attr(_find_one(doc, "//meta[@name='description']"), 1)
    count = _number_in(str(_find_one(doc, _PICTURE_COUNT_XPATH)))
    pictures = [
        _attr(_find_one(doc, picture_xpath.format(i)), 1) for i in range(1, count + 1)
    ]
    return Ymgal(
        id=numeric_id,
        title=title,
        picture_type=picture_type,
        picture_description=description,
        picture_list=",".join(pictures),
    )


def parse_random_command(text: str) -> str | None:
    """The picture type asked for by a random-picture command, or None."""
    m = _RANDOM_COMMAND.match(text)
    if m is None:
        return None
    return _type_of(m.group(1))


def parse_search_command(text: str) -> tuple[str, str] | None:
    """The picture type and key asked for by a search command, or None."""
    m = _SEARCH_COMMAND.match(text)
    if m is None:
        return None
    return _type_of(m.group(1)), m.group(2)


def build_messages(entry: Ymgal | None, nickname: str) -> list[tuple[str, str]]:
    """The messages to send for an entry, as (kind, content) pairs.

    Kind is "text" or "image". Without pictures the result is a single
    text saying that there is no such picture.
    """
    if entry is None or not entry.picture_list:
        return [("text", nickname + "暂时没有这样的图呢")]
    messages = [("text", entry.title)]
    if entry.picture_description:
        messages.append(("text", entry.picture_description))
    messages.extend(("image", url) for url in entry.pictures())
    return messages


class YmgalScraper:
    """Fetches new picture sets from the site into a database."""

    def __init__(
        self,
        db: YmgalDB,
        session: requests.Session | None = None,
        delay: float = 0.5,
    ) -> None:
        self.db = db
        self.session = session if session is not None else requests.Session()
        self.delay = delay
        self._lock = threading.Lock()

    def _pause(self) -> None:
        if self.delay > 0:
            time.sleep(self.delay)

    def fetch(self, url: str) -> str:
        """The text of a page; raises on a failed request."""
        response = self.session.get(url, timeout=30)
        response.raise_for_status()
        return response.text

    def max_pages(self) -> tuple[int, int]:
        """The number of search pages of CG sets and of emoticon sets."""
        cg = parse_max_page(self.fetch(search_url(CG_TYPE, 1)))
        emoticon = parse_max_page(self.fetch(search_url(EMOTICON_TYPE, 1)))
        return cg, emoticon

    def collect_ids(self, picture_type: str, pages: int) -> list[str]:
        """The set ids on search pages 1 to pages of a picture type."""
        ids: list[str] = []
        for page in range(1, pages + 1):
            ids.extend(parse_picset_ids(self.fetch(search_url(picture_type, page))))
            self._pause()
        return ids

    def store(self, picset_id, picture_type: str) -> Ymgal:
        """Fetch one picture set and save it."""
        entry = parse_picset(
            self.fetch(WEB_PIC_URL + str(picset_id)), picset_id, picture_type
        )
        self.db.upsert(entry)
        return entry

    def _store_new(self, ids: list[str], picture_type: str) -> int:
        stored = 0
        for picset_id in reversed(ids):
            existing = self.db.get_by_id(picset_id)
            if existing is not None and existing.picture_list:
                break
            self.store(picset_id, picture_type)
            stored += 1
            self._pause()
        return stored

    def update(self) -> int:
        """Store the sets not yet known, oldest first; return how many."""
        cg_pages, emoticon_pages = self.max_pages()
        cg_ids = self.collect_ids(CG_TYPE, cg_pages)
        emoticon_ids = self.collect_ids(EMOTICON_TYPE, emoticon_pages)
        with self._lock:
            return self._store_new(cg_ids, CG_TYPE) + self._store_new(
                emoticon_ids, EMOTICON_TYPE
            )