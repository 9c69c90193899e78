from __future__ import annotations

import pytest

from til_api.slug import TagSlugCodec, slug_to_tag, tag_to_slug


@pytest.mark.parametrize("tag", ["python", "open-source", "snake_case", "K8s"])
def test_plain_tags_map_to_themselves(tag: str) -> None:
    assert tag_to_slug(tag) == tag
    assert slug_to_tag(tag) == tag


def test_non_ascii_tag_is_base64_encoded() -> None:
    slug = tag_to_slug("数据库")
    assert slug.startswith("b64_")
    assert "=" not in slug and "+" not in slug and "/" not in slug
    assert slug_to_tag(slug) == "数据库"


@pytest.mark.parametrize("tag", ["with space", "c++", "a/b", "日本語 タグ", "emoji 🚀", "?>", ""])
def test_round_trip(tag: str) -> None:
    assert slug_to_tag(tag_to_slug(tag)) == tag


def test_url_safe_alphabet_substitution() -> None:
    # "?>" encodes to "Pz4=", "??>" to "Pz8+": the latter needs the "-" substitution.
    assert tag_to_slug("?>") == "b64_Pz4"
    assert tag_to_slug("??>") == "b64_Pz8-"


def test_malformed_slug_falls_back_and_is_counted() -> None:
    codec = TagSlugCodec()
    assert codec.slug_to_tag("b64_A") == "b64_A"
    assert codec.slug_to_tag("b64_!!!!") == "b64_!!!!"
    assert codec.decode_failures == 2


def test_invalid_utf8_falls_back() -> None:
    codec = TagSlugCodec()
    # "/w" decodes to the single byte 0xff, which is not UTF-8.
    assert codec.slug_to_tag("b64__w") == "b64__w"
    assert codec.decode_failures == 1
