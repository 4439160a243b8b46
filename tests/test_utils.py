from datetime import date, datetime, timedelta, timezone

import pytest

from common.model import Topic
from common.utils import (
    DEFAULT_AUTHOR,
    join_keywords,
    make_preview,
    parse_limit,
    split_keywords,
    to_date_string,
    to_utc_iso,
)


@pytest.mark.parametrize(
    "keywords, expected",
    [
        (["faq", "setup"], "faq, setup"),
        ("faq,setup", "faq,setup"),
        ([], ""),
        (None, ""),
    ],
)
def test_join_keywords(keywords, expected):
    assert join_keywords(keywords) == expected


def test_split_keywords_trims():
    assert split_keywords(" faq ,setup,  vpn") == ["faq", "setup", "vpn"]
    assert split_keywords("") == []
    assert split_keywords(None) == []


def test_keyword_with_comma_is_split_on_read():
    assert split_keywords(join_keywords(["a,b", "c"])) == ["a", "b", "c"]


def test_make_preview():
    assert make_preview("<b>Hi</b> there") == "Hi there..."
    assert make_preview('<a href="x">link</a>') == "link..."
    assert make_preview("") == ""
    assert make_preview(None) == ""


def test_make_preview_truncates_after_stripping():
    preview = make_preview("<div>" + "x" * 500 + "</div>")

    assert preview == "x" * 200 + "..."


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("10", 10),
        ("  3", 3),
        ("5abc", 5),
        ("-1", -1),
        ("0", 0),
        ("abc", "abc"),
        ("", None),
        (None, None),
    ],
)
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected


def test_to_date_string():
    assert to_date_string(datetime(2024, 1, 31, 23, 59)) == "2024-01-31"
    assert to_date_string(date(2024, 2, 1)) == "2024-02-01"

    late_evening = datetime(2024, 1, 31, 22, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert to_date_string(late_evening) == "2024-02-01"


def test_to_date_string_defaults_to_today():
    assert to_date_string(None) == datetime.now(timezone.utc).date().isoformat()


def test_topic_from_db_row():
    topic = Topic.from_db_row(
        {
            "id": 1,
            "title": "Reset password",
            "category": "accounts",
            "keywords": "password, login",
            "preview": "Go to...",
            "content": "Go to",
            "author": DEFAULT_AUTHOR,
            "created_date": datetime(2024, 6, 1, 8, 0),
            "views": 2,
            "helpful": 0,
        }
    )

    assert topic.keywords == ["password", "login"]
    assert topic.date == "2024-06-01"
    assert topic.model_dump(mode="json")["created_date"] == "2024-06-01T08:00:00.000Z"


def test_to_utc_iso():
    assert to_utc_iso(datetime(2024, 3, 1, 9, 0)) == "2024-03-01T09:00:00.000Z"

    sao_paulo = datetime(2024, 3, 1, 6, 0, 0, 250000, tzinfo=timezone(timedelta(hours=-3)))
    assert to_utc_iso(sao_paulo) == "2024-03-01T09:00:00.250Z"
