import pytest
import requests
import responses

from plugkit.ymgal_db import Ymgal, YmgalDB
from plugkit.ymgal_scraper import (
    CG_TYPE,
    EMOTICON_TYPE,
    WEB_PIC_URL,
    YmgalScraper,
    build_messages,
    parse_max_page,
    parse_picset,
    parse_picset_ids,
    parse_random_command,
    parse_search_command,
    search_url,
)


def search_html(max_page, ids):
    links = "".join(
        f'<a class="icon item" href="?page={n}">{n}</a>' for n in range(1, max_page + 1)
    )
    cards = "".join(
        f'<div class="card"><div class="cover"><a href="/co/picset/{i}">x</a></div>'
        f'<div><a href="/other/9">y</a></div></div>'
        for i in ids
    )
    return (
        "<html><body>"
        f'<div id="pager-box"><div>{links}'
        '<a class="icon item pager-next" href="?page=2">next</a></div></div>'
        f'<div id="picset-result-list"><ul>{cards}</ul></div>'
        "</body></html>"
    )


def cg_html(title, description, urls):
    slides = "".join(f'<div class="swiper-slide" data-src="{u}"></div>' for u in urls)
    return (
        "<html><head>"
        f'<meta name="name" content="{title}">'
        f'<meta name="description" content="{description}">'
        "</head><body>"
        '<div class="meta-info"><div class="meta-right">'
        f"<span>a</span><span>共 {len(urls)} 张</span></div></div>"
        '<div id="main-picset-warp"><div><div>first</div><div><div>'
        f'<div class="swiper-wrapper">{slides}</div>'
        "</div></div></div></div></body></html>"
    )


def emoticon_html(title, description, urls):
    items = "".join(f'<div><img alt="e" src="{u}"></div>' for u in urls)
    return (
        "<html><head>"
        f'<meta name="name" content="{title}">'
        f'<meta name="description" content="{description}">'
        "</head><body>"
        '<div class="meta-info"><div class="meta-right">'
        f"<span>a</span><span>{len(urls)}</span></div></div>"
        '<div id="main-picset-warp"><div>'
        f'<div class="stream-list">{items}</div>'
        "</div></div></body></html>"
    )


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def db(tmp_path):
    with YmgalDB(tmp_path / "ymgal.db") as database:
        yield database


def test_search_url_cg():
    assert search_url(CG_TYPE, 3) == (
        "https://www.ymgal.com/search?type=picset&sort=default&category=Gal+CG&page=3"
    )


def test_search_url_unknown_type():
    with pytest.raises(ValueError):
        search_url("nope", 1)


def test_parse_max_page():
    assert parse_max_page(search_html(12, ["1"])) == 12


def test_parse_max_page_without_pager():
    with pytest.raises(ValueError):
        parse_max_page("<html><body><p>empty</p></body></html>")


def test_parse_picset_ids():
    assert parse_picset_ids(search_html(1, ["101", "202"])) == ["101", "202"]


def test_parse_cg_picset():
    urls = ["https://img.example.com/1.jpg", "https://img.example.com/2.jpg"]
    entry = parse_picset(cg_html("Title A", "Desc A", urls), "55", CG_TYPE)
    assert entry == Ymgal(
        id=55,
        title="Title A",
        picture_type=CG_TYPE,
        picture_description="Desc A",
        picture_list=",".join(urls),
    )


def test_parse_emoticon_picset():
    urls = ["https://img.example.com/e1.png"]
    entry = parse_picset(emoticon_html("Emo", "", urls), 8, EMOTICON_TYPE)
    assert entry.pictures() == urls
    assert entry.title == "Emo"
    assert entry.picture_type == EMOTICON_TYPE


def test_parse_picset_bad_id():
    with pytest.raises(ValueError):
        parse_picset(cg_html("t", "d", []), "abc", CG_TYPE)


def test_parse_random_command():
    assert parse_random_command("随机galCG") == CG_TYPE
    assert parse_random_command("随机gal表情包") == EMOTICON_TYPE
    assert parse_random_command("随机galxx") is None


def test_parse_search_command():
    assert parse_search_command("galCG樱花") == (CG_TYPE, "樱花")
    assert parse_search_command("gal表情包abc1") == (EMOTICON_TYPE, "abc1")
    assert parse_search_command("galCG" + "a" * 26) is None
    assert parse_search_command("galCG") is None


def test_build_messages_empty():
    expected = [("text", "Bot暂时没有这样的图呢")]
    assert build_messages(None, "Bot") == expected
    assert build_messages(Ymgal(id=1, title="t"), "Bot") == expected


def test_build_messages_full():
    entry = Ymgal(
        id=1,
        title="T",
        picture_type=CG_TYPE,
        picture_description="D",
        picture_list="https://img.example.com/a.jpg,https://img.example.com/b.jpg",
    )
    assert build_messages(entry, "Bot") == [
        ("text", "T"),
        ("text", "D"),
        ("image", "https://img.example.com/a.jpg"),
        ("image", "https://img.example.com/b.jpg"),
    ]


def test_build_messages_without_description():
    entry = Ymgal(id=1, title="T", picture_list="https://img.example.com/a.jpg")
    assert build_messages(entry, "Bot") == [
        ("text", "T"),
        ("image", "https://img.example.com/a.jpg"),
    ]


def test_fetch_error_raises(db, mocked):
    mocked.add(responses.GET, WEB_PIC_URL + "1", status=500)
    scraper = YmgalScraper(db, delay=0)
    with pytest.raises(requests.HTTPError):
        scraper.fetch(WEB_PIC_URL + "1")


def test_collect_ids_over_pages(db, mocked):
    mocked.add(responses.GET, search_url(CG_TYPE, 1), body=search_html(2, ["1", "2"]))
    mocked.add(responses.GET, search_url(CG_TYPE, 2), body=search_html(2, ["3"]))
    scraper = YmgalScraper(db, delay=0)
    assert scraper.collect_ids(CG_TYPE, 2) == ["1", "2", "3"]


def test_store_saves_entry(db, mocked):
    urls = ["https://img.example.com/x.jpg"]
    mocked.add(responses.GET, WEB_PIC_URL + "42", body=cg_html("X", "Y", urls))
    scraper = YmgalScraper(db, delay=0)
    entry = scraper.store("42", CG_TYPE)
    assert db.get_by_id(42) == entry
    assert entry.pictures() == urls


def test_update_stops_at_known_set(db, mocked):
    db.upsert(
        Ymgal(
            id=101,
            title="known",
            picture_type=CG_TYPE,
            picture_list="https://img.example.com/k.jpg",
        )
    )
    mocked.add(responses.GET, search_url(CG_TYPE, 1), body=search_html(1, ["101", "202"]))
    mocked.add(responses.GET, search_url(EMOTICON_TYPE, 1), body=search_html(1, ["303"]))
    mocked.add(
        responses.GET,
        WEB_PIC_URL + "202",
        body=cg_html("New CG", "cg desc", ["https://img.example.com/n.jpg"]),
    )
    mocked.add(
        responses.GET,
        WEB_PIC_URL + "303",
        body=emoticon_html("New Emo", "emo desc", ["https://img.example.com/e.png"]),
    )
    scraper = YmgalScraper(db, delay=0)
    assert scraper.max_pages() == (1, 1)
    assert scraper.update() == 2
    assert db.get_by_id(202).title == "New CG"
    assert db.get_by_id(303).picture_type == EMOTICON_TYPE
    assert db.get_by_id(101).title == "known"