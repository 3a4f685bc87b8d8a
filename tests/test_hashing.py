"""Tests for content hashing."""

from canopy_registry.utils.hashing import canonical_json, content_checksum, json_checksum


def test_checksum_is_md5_hex():
    digest = content_checksum("hello")
    assert digest == "5d41402abc4b2a76b9719d911017c592"
    assert len(digest) == 32


def test_identical_text_identical_digest():
    assert content_checksum("export const a = 1;\n") == content_checksum("export const a = 1;\n")


def test_formatting_changes_alter_digest():
    base = content_checksum("export const a = 1;\n")
    assert content_checksum("export const a = 1;\r\n") != base
    assert content_checksum("export const a =  1;\n") != base


def test_canonical_json_is_compact_and_ordered():
    assert canonical_json({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'


def test_canonical_json_keeps_unicode():
    assert canonical_json({"name": "Café"}) == '{"name":"Café"}'


def test_json_checksum_depends_on_key_order():
    assert json_checksum({"a": 1, "b": 2}) != json_checksum({"b": 2, "a": 1})
    assert json_checksum({"a": 1}) == content_checksum('{"a":1}')
