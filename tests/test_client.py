from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from bilibili_danmaku.client import BiliDanmakuClient
from bilibili_danmaku.config import COMMENT_URL_TEMPLATE, PAGELIST_ENDPOINT, SEARCH_ENDPOINT, ClientConfig
from bilibili_danmaku.errors import InvalidArgument, ParseError, UpstreamError
from bilibili_danmaku.models import CommentRecord, SegmentDescriptor, VideoSummary

SAMPLE_XML = (
    '<i><d p="1.5,1,25,16777215,0,0,abc,123">Hello</d>'
    '<d p="3.0,1,25,16777215,0,0,abc,124">World</d></i>'
)


def _query(call) -> dict:
    return parse_qs(urlparse(call.request.url).query)


@responses.activate
def test_search_videos_strips_markup(client: BiliDanmakuClient) -> None:
    responses.add(
        responses.GET,
        SEARCH_ENDPOINT,
        json={
            "code": 0,
            "data": {
                "result": [
                    {"bvid": "BV1xx", "title": "<em>Foo</em>Bar", "pic": "p.jpg", "description": "d"},
                ]
            },
        },
        status=200,
    )

    videos = client.search_videos("Foo")

    assert videos == [VideoSummary(id="BV1xx", title="FooBar", cover="p.jpg", desc="d")]
    query = _query(responses.calls[0])
    assert query["search_type"] == ["video"]
    assert query["keyword"] == ["Foo"]
    assert query["page"] == ["1"]


@responses.activate
def test_search_videos_fallbacks_and_encoding(client: BiliDanmakuClient) -> None:
    responses.add(
        responses.GET,
        SEARCH_ENDPOINT,
        json={
            "code": 0,
            "data": {
                "result": [
                    {"aid": 170001, "title": '<em class="keyword">弹幕</em>测试'},
                    {"title": None},
                ]
            },
        },
        status=200,
    )

    videos = client.search_videos("弹幕 测试&1", page=3)

    assert [v.id for v in videos] == ["170001", ""]
    assert videos[0].title == "弹幕测试"
    assert videos[1] == VideoSummary(id="", title="", cover="", desc="")
    assert all("<" not in v.title and ">" not in v.title for v in videos)
    query = _query(responses.calls[0])
    assert query["keyword"] == ["弹幕 测试&1"]
    assert query["page"] == ["3"]
    assert responses.calls[0].request.headers["User-Agent"] == ClientConfig().user_agent


@responses.activate
def test_search_videos_without_result(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, json={"code": 0, "data": {}}, status=200)
    assert client.search_videos("nothing") == []


@responses.activate
def test_search_videos_upstream_error(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, json={"code": -400, "message": "invalid"}, status=200)

    with pytest.raises(UpstreamError) as excinfo:
        client.search_videos("Foo")

    assert excinfo.value.message == "invalid"
    assert excinfo.value.code == -400


@responses.activate
def test_search_videos_error_without_message(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, json={"code": -412}, status=200)

    with pytest.raises(UpstreamError) as excinfo:
        client.search_videos("Foo")

    assert excinfo.value.message == "未知错误"


@responses.activate
def test_search_videos_empty_body(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, body="", status=200)

    with pytest.raises(UpstreamError):
        client.search_videos("Foo")


@responses.activate
def test_search_videos_payload_not_object(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, json=[1], status=200)

    with pytest.raises(UpstreamError) as excinfo:
        client.search_videos("Foo")

    assert excinfo.value.message == "未知错误"
    assert excinfo.value.endpoint == SEARCH_ENDPOINT


@pytest.mark.parametrize("endpoint", [SEARCH_ENDPOINT, PAGELIST_ENDPOINT])
@responses.activate
def test_json_endpoints_http_error(client: BiliDanmakuClient, endpoint: str) -> None:
    responses.add(responses.GET, endpoint, json={"code": 0, "data": {}}, status=503)

    with pytest.raises(UpstreamError) as excinfo:
        if endpoint == SEARCH_ENDPOINT:
            client.search_videos("Foo")
        else:
            client.resolve_segments("BV1xx411c7mD")

    assert excinfo.value.code is None


@pytest.mark.parametrize(
    "data",
    [
        [1],
        "result",
        {"result": {"bvid": "BV1xx"}},
        {"result": [1]},
        {"result": ["BV1xx"]},
    ],
)
@responses.activate
def test_search_videos_unexpected_shape(client: BiliDanmakuClient, data: object) -> None:
    responses.add(responses.GET, SEARCH_ENDPOINT, json={"code": 0, "data": data}, status=200)

    with pytest.raises(UpstreamError) as excinfo:
        client.search_videos("Foo")

    assert excinfo.value.endpoint == SEARCH_ENDPOINT


@pytest.mark.parametrize(
    "data",
    [
        {"cid": 1},
        "P1",
        [1],
        [{"cid": "abc", "page": 1, "part": "P1"}],
        [{"cid": 100, "page": [1], "part": "P1"}],
    ],
)
@responses.activate
def test_resolve_segments_unexpected_shape(client: BiliDanmakuClient, data: object) -> None:
    responses.add(responses.GET, PAGELIST_ENDPOINT, json={"code": 0, "data": data}, status=200)

    with pytest.raises(UpstreamError) as excinfo:
        client.resolve_segments("BV1xx411c7mD")

    assert excinfo.value.endpoint == PAGELIST_ENDPOINT


@responses.activate
def test_resolve_segments_by_bvid(client: BiliDanmakuClient) -> None:
    responses.add(
        responses.GET,
        PAGELIST_ENDPOINT,
        json={
            "code": 0,
            "data": [
                {"cid": 100, "page": 1, "part": "P1"},
                {"cid": 101, "page": 2, "part": "P2"},
            ],
        },
        status=200,
    )

    segments = client.resolve_segments("bv1xx411c7mD")

    assert segments == [
        SegmentDescriptor(cid=100, page=1, name="P1"),
        SegmentDescriptor(cid=101, page=2, name="P2"),
    ]
    assert _query(responses.calls[0]) == {"bvid": ["bv1xx411c7mD"]}


@responses.activate
def test_resolve_segments_by_aid(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, PAGELIST_ENDPOINT, json={"code": 0, "data": None}, status=200)

    assert client.resolve_segments("170001") == []
    assert _query(responses.calls[0]) == {"aid": ["170001"]}


@responses.activate
def test_resolve_segments_upstream_error(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, PAGELIST_ENDPOINT, json={"code": -404, "message": "啥都木有"}, status=200)

    with pytest.raises(UpstreamError, match="啥都木有"):
        client.resolve_segments("BV1xx411c7mD")


@responses.activate
def test_empty_arguments_skip_network(client: BiliDanmakuClient) -> None:
    with pytest.raises(InvalidArgument):
        client.resolve_segments("")
    with pytest.raises(InvalidArgument):
        client.fetch_comments(0)
    assert len(responses.calls) == 0


@responses.activate
def test_fetch_comments_sorted(client: BiliDanmakuClient) -> None:
    url = COMMENT_URL_TEMPLATE.format(cid=100)
    responses.add(responses.GET, url, body=SAMPLE_XML.encode("utf-8"), status=200, content_type="text/xml")

    comments = client.fetch_comments(100)

    assert [c.content for c in comments] == ["Hello", "World"]
    assert comments[0] == CommentRecord(
        time=1.5,
        mode=1,
        font_size=25,
        color=16777215,
        timestamp=0,
        pool=0,
        mid_hash="abc",
        dmid="123",
        content="Hello",
    )
    assert comments[1].time == 3.0
    assert responses.calls[0].request.url == url


@responses.activate
def test_fetch_comments_http_error(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, COMMENT_URL_TEMPLATE.format(cid=7), status=404)

    with pytest.raises(UpstreamError) as excinfo:
        client.fetch_comments(7)

    assert excinfo.value.code is None


@responses.activate
def test_fetch_comments_network_error(client: BiliDanmakuClient) -> None:
    responses.add(
        responses.GET,
        COMMENT_URL_TEMPLATE.format(cid=7),
        body=requests.ConnectionError("connection reset"),
    )

    with pytest.raises(UpstreamError, match="connection reset"):
        client.fetch_comments(7)


@responses.activate
def test_fetch_comments_malformed_document(client: BiliDanmakuClient) -> None:
    responses.add(responses.GET, COMMENT_URL_TEMPLATE.format(cid=7), body="<i><d p='1'>", status=200)

    with pytest.raises(ParseError):
        client.fetch_comments(7)


@responses.activate
def test_custom_config_endpoints_and_headers() -> None:
    config = ClientConfig(
        user_agent="TestAgent/1.0",
        referer="https://www.bilibili.com/",
        comment_url_template="https://example.com/dm/{cid}.xml",
    )
    responses.add(responses.GET, "https://example.com/dm/5.xml", body="<i></i>", status=200)

    comments = BiliDanmakuClient(config=config).fetch_comments(5)

    assert comments == []
    headers = responses.calls[0].request.headers
    assert headers["User-Agent"] == "TestAgent/1.0"
    assert headers["Referer"] == "https://www.bilibili.com/"


@responses.activate
def test_headers_come_from_session() -> None:
    session = requests.Session()
    session.headers["User-Agent"] = "OwnAgent/1.0"
    responses.add(responses.GET, COMMENT_URL_TEMPLATE.format(cid=5), body="<i></i>", status=200)

    BiliDanmakuClient(session=session).fetch_comments(5)

    assert responses.calls[0].request.headers["User-Agent"] == "OwnAgent/1.0"
