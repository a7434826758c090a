"""Tests for the Headers container."""

import pytest

from unixfetch import FetchError, Headers, InvalidHeaderError


class TestLookup:
    def test_case_insensitive_has_and_get(self) -> None:
        h = Headers({"Content-Type": "text/plain"})
        assert h.has("content-type") is True
        assert h.has("CONTENT-TYPE") is True
        assert h.get("content-TYPE") == "text/plain"

    def test_missing(self) -> None:
        h = Headers()
        assert h.has("Accept") is False
        assert h.get("Accept") is None
        assert h.get_all("Accept") == []

    def test_contains_and_len(self) -> None:
        h = Headers([("A", "1"), ("b", "2")])
        assert "a" in h
        assert "B" in h
        assert "c" not in h
        assert 42 not in h
        assert len(h) == 2


class TestMutation:
    def test_set_replaces_all_values(self) -> None:
        h = Headers()
        h.append("Cookie", "a=1")
        h.append("Cookie", "b=2")
        h.set("cookie", "c=3")
        assert h.get_all("Cookie") == ["c=3"]

    def test_set_keeps_first_seen_casing(self) -> None:
        h = Headers({"X-Trace-Id": "1"})
        h.set("x-trace-id", "2")
        assert list(h) == ["X-Trace-Id"]

    def test_append_keeps_values_in_order(self) -> None:
        h = Headers()
        h.append("Set-Cookie", "a=1")
        h.append("set-cookie", "b=2")
        assert h.get_all("SET-COOKIE") == ["a=1", "b=2"]
        assert h.get("Set-Cookie") == "a=1, b=2"

    def test_delete(self) -> None:
        h = Headers({"Accept": "*/*"})
        h.delete("accept")
        h.delete("never-there")
        assert h.has("Accept") is False

    def test_values_are_stringified_and_trimmed(self) -> None:
        h = Headers()
        h.set("Content-Length", 5)
        h.set("X-Pad", "  padded\t")
        assert h.get("content-length") == "5"
        assert h.get("x-pad") == "padded"


class TestIteration:
    def test_items_in_insertion_order(self) -> None:
        h = Headers()
        h.set("B", "2")
        h.set("A", "1")
        h.append("b", "3")
        assert list(h.items()) == [("B", "2, 3"), ("A", "1")]

    def test_raw_export(self) -> None:
        h = Headers([("Set-Cookie", "a=1"), ("Host", "x"), ("set-cookie", "b=2")])
        assert h.raw() == {"Set-Cookie": ["a=1", "b=2"], "Host": ["x"]}

    def test_raw_is_a_copy(self) -> None:
        h = Headers({"A": "1"})
        h.raw()["A"].append("2")
        assert h.get_all("A") == ["1"]


class TestConstruction:
    def test_from_mapping_with_lists(self) -> None:
        h = Headers({"Accept": ["text/html", "application/json"]})
        assert h.get_all("accept") == ["text/html", "application/json"]

    def test_from_headers_is_a_copy(self) -> None:
        original = Headers({"A": "1"})
        copy = Headers(original)
        original.append("A", "2")
        original.set("B", "3")
        assert copy.get_all("A") == ["1"]
        assert copy.has("B") is False

    def test_from_raw_export(self) -> None:
        original = Headers([("Cookie", "a"), ("cookie", "b")])
        assert Headers(original.raw()) == original

    def test_string_init_rejected(self) -> None:
        with pytest.raises(TypeError):
            Headers("Accept: */*")  # type: ignore[arg-type]

    def test_bad_pair_rejected(self) -> None:
        with pytest.raises(TypeError):
            Headers([("A", "1", "extra")])  # type: ignore[list-item]

    def test_equality(self) -> None:
        assert Headers({"A": "1"}) == Headers([("A", "1")])
        assert Headers({"A": "1"}) != Headers({"A": "2"})


class TestValidation:
    @pytest.mark.parametrize("name", ["", "Bad Name", "X:Y", "é"])
    def test_invalid_name(self, name: str) -> None:
        with pytest.raises(InvalidHeaderError) as exc_info:
            Headers().set(name, "v")
        assert exc_info.value.name == name

    @pytest.mark.parametrize("value", ["a\r\nInjected: 1", "a\nb", "nul\x00"])
    def test_invalid_value(self, value: str) -> None:
        with pytest.raises(InvalidHeaderError) as exc_info:
            Headers().append("X-Test", value)
        assert exc_info.value.name == "X-Test"

    @pytest.mark.parametrize("name", ["Bad Name", "X:Y"])
    def test_contains_validates_like_has(self, name: str) -> None:
        h = Headers({"X-Test": "1"})
        with pytest.raises(InvalidHeaderError):
            h.has(name)
        with pytest.raises(InvalidHeaderError):
            name in h  # noqa: B015

    def test_error_family(self) -> None:
        with pytest.raises(FetchError):
            Headers({"bad name": "v"})
        with pytest.raises(TypeError):
            Headers({"bad name": "v"})
