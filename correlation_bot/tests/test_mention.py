import html

import pytest

from correlation_bot.mention import Dialect, Identity, build_mention, escape_markdown_v2

from .fakes import FakeUser


ID = 12345

HTML_CASES = [
    ({"id": ID, "first_name": "Foo", "last_name": "Bar"}, '<a href="tg://user?id=12345">Foo Bar</a>'),
    ({"id": ID, "first_name": "Alice"}, '<a href="tg://user?id=12345">Alice</a>'),
    ({"id": ID, "last_name": "Smith"}, '<a href="tg://user?id=12345">Smith</a>'),
    ({"id": ID}, '<a href="tg://user?id=12345">unknown</a>'),
    ({"id": ID, "username": "john_doe"}, '<a href="https://t.me/john_doe">@john_doe</a>'),
    ({"id": ID, "first_name": "<&>"}, '<a href="tg://user?id=12345">&lt;&amp;&gt;</a>'),
    ({"id": ID, "first_name": "😀😃"}, '<a href="tg://user?id=12345">&#x1f600;&#x1f603;</a>'),
    ({"id": ID, "first_name": 'He said "Hi"'}, '<a href="tg://user?id=12345">He said &quot;Hi&quot;</a>'),
    ({"id": ID, "first_name": "O'Reilly"}, '<a href="tg://user?id=12345">O&apos;Reilly</a>'),
    ({"id": "54321", "first_name": "Foo"}, '<a href="tg://user?id=54321">Foo</a>'),
    ({"id": ID, "first_name": "  Alice  ", "last_name": "  Bob  "}, '<a href="tg://user?id=12345">Alice Bob</a>'),
    ({"id": ID, "first_name": "   "}, '<a href="tg://user?id=12345">unknown</a>'),
    ({"id": ID, "first_name": "", "last_name": ""}, '<a href="tg://user?id=12345">unknown</a>'),
    ({"id": ID, "first_name": "Иван"}, '<a href="tg://user?id=12345">Иван</a>'),
]

MARKDOWN_CASES = [
    ({"id": ID, "first_name": "John_Doe"}, "[John_Doe](tg://user?id=12345)"),
    ({"id": ID, "first_name": "A[Test]B"}, "[A[TestB](tg://user?id=12345)"),
    ({"id": ID, "first_name": "Foo", "last_name": "Bar"}, "[Foo Bar](tg://user?id=12345)"),
    ({"id": ID, "username": "john_doe"}, "[@john_doe](https://t.me/john_doe)"),
    ({"id": ID}, "[unknown](tg://user?id=12345)"),
    ({"id": ID, "first_name": "😀😃"}, "[😀😃](tg://user?id=12345)"),
    ({"id": ID, "first_name": "Alice"}, "[Alice](tg://user?id=12345)"),
    ({"id": ID, "last_name": "Smith"}, "[Smith](tg://user?id=12345)"),
    ({"id": ID, "first_name": 'He said "Hi"'}, '[He said "Hi"](tg://user?id=12345)'),
    ({"id": ID, "first_name": "O'Reilly"}, "[O'Reilly](tg://user?id=12345)"),
    ({"id": "54321", "first_name": "Foo"}, "[Foo](tg://user?id=54321)"),
    ({"id": ID, "first_name": "  Alice  ", "last_name": "  Bob  "}, "[Alice Bob](tg://user?id=12345)"),
    ({"id": ID, "first_name": "   "}, "[unknown](tg://user?id=12345)"),
    ({"id": ID, "first_name": "", "last_name": ""}, "[unknown](tg://user?id=12345)"),
]

MARKDOWN_V2_CASES = [
    ({"id": ID, "first_name": "Test*User"}, "[Test\\*User](tg://user?id=12345)"),
    ({"id": ID, "first_name": "A[Test]B"}, "[A\\[Test\\]B](tg://user?id=12345)"),
    ({"id": ID, "first_name": "Foo", "last_name": "Bar"}, "[Foo Bar](tg://user?id=12345)"),
    ({"id": ID}, "[unknown](tg://user?id=12345)"),
    ({"id": ID, "first_name": "😀😃"}, "[😀😃](tg://user?id=12345)"),
    ({"id": ID, "first_name": "(Test)"}, "[\\(Test\\)](tg://user?id=12345)"),
    ({"id": ID, "username": "john_doe"}, "[@john\\_doe](https://t.me/john_doe)"),
    ({"id": ID, "first_name": "Alice"}, "[Alice](tg://user?id=12345)"),
    ({"id": ID, "last_name": "Smith"}, "[Smith](tg://user?id=12345)"),
    ({"id": ID, "first_name": 'He said "Hi"'}, '[He said "Hi"](tg://user?id=12345)'),
    ({"id": ID, "first_name": "O'Reilly"}, "[O'Reilly](tg://user?id=12345)"),
    ({"id": "54321", "first_name": "Foo"}, "[Foo](tg://user?id=54321)"),
    ({"id": ID, "first_name": "  Alice  ", "last_name": "  Bob  "}, "[Alice Bob](tg://user?id=12345)"),
    ({"id": ID, "first_name": "   "}, "[unknown](tg://user?id=12345)"),
    ({"id": ID, "first_name": "", "last_name": ""}, "[unknown](tg://user?id=12345)"),
    ({"id": ID, "first_name": "a\\b"}, "[a\\\\b](tg://user?id=12345)"),
]


@pytest.mark.parametrize("fields, expected", HTML_CASES)
def test_html(fields, expected) -> None:
    assert build_mention(Identity(**fields), Dialect.HTML) == expected


@pytest.mark.parametrize("fields, expected", MARKDOWN_CASES)
def test_legacy_markdown(fields, expected) -> None:
    assert build_mention(Identity(**fields), Dialect.MARKDOWN) == expected


@pytest.mark.parametrize("fields, expected", MARKDOWN_V2_CASES)
def test_markdown_v2(fields, expected) -> None:
    assert build_mention(Identity(**fields), Dialect.MARKDOWN_V2) == expected


def test_defaults_to_html() -> None:
    assert build_mention(Identity(id=ID, first_name="Foo")) == '<a href="tg://user?id=12345">Foo</a>'


@pytest.mark.parametrize("dialect", ["HTML", "XML", None, 42, ["Markdown"]])
def test_unrecognised_or_string_dialect_renders_html(dialect) -> None:
    assert build_mention(Identity(id=ID, first_name="Foo"), dialect) == '<a href="tg://user?id=12345">Foo</a>'


@pytest.mark.parametrize(
    "value, dialect",
    [("Markdown", Dialect.MARKDOWN), ("MarkdownV2", Dialect.MARKDOWN_V2), ("HTML", Dialect.HTML)],
)
def test_parse_mode_strings(value, dialect) -> None:
    assert Dialect.parse(value) is dialect


@pytest.mark.parametrize("dialect", list(Dialect))
def test_numeric_and_string_ids_render_identically(dialect) -> None:
    assert build_mention(Identity(id=ID, first_name="Foo"), dialect) == build_mention(
        Identity(id=str(ID), first_name="Foo"), dialect
    )


@pytest.mark.parametrize("dialect", list(Dialect))
def test_username_link_is_verbatim(dialect) -> None:
    result = build_mention(Identity(id=ID, username="some_user_1", first_name="<x>"), dialect)
    assert "https://t.me/some_user_1" in result
    assert "<x>" not in result


@pytest.mark.parametrize("dialect", list(Dialect))
def test_blank_names_fall_back_to_unknown(dialect) -> None:
    result = build_mention(Identity(id=ID, first_name=" \t", last_name="\n"), dialect)
    assert "unknown" in result


def test_html_label_round_trips_through_entity_decoder() -> None:
    label = "Tom & \"Jerry\" <'cat'> 🐱"
    result = build_mention(Identity(id=ID, first_name=label))
    inner = result[len('<a href="tg://user?id=12345">') : -len("</a>")]
    assert html.unescape(inner) == label
    assert inner.count("&amp;") == 1


def test_markdown_v2_escapes_every_reserved_character_once() -> None:
    reserved = "_*[]()~`>#+-=|{}.!\\"
    escaped = escape_markdown_v2(reserved)
    assert escaped == "".join("\\" + char for char in reserved)
    assert escape_markdown_v2("plain text 123") == "plain text 123"


def test_accepts_telegram_user_objects_and_mappings() -> None:
    user = FakeUser(id=5, first_name="Ann", last_name=None)
    assert build_mention(user) == '<a href="tg://user?id=5">Ann</a>'
    assert build_mention({"id": 5, "username": "ann"}) == '<a href="https://t.me/ann">@ann</a>'


def test_never_fails_on_missing_identity() -> None:
    assert build_mention(None) == '<a href="tg://user?id=None">unknown</a>'
