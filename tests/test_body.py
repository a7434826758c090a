"""Tests for body implementations and extract_body()."""

import io

import pytest

from unixfetch import (
    FORM_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    Body,
    BodyUsedError,
    BytesBody,
    FormBody,
    StreamBody,
    extract_body,
)
from unixfetch.testing import chunks


class TestExtractBody:
    def test_none(self) -> None:
        assert extract_body(None) is None

    def test_str(self) -> None:
        body = extract_body("héllo")
        assert isinstance(body, BytesBody)
        assert body.content_type() == TEXT_CONTENT_TYPE
        assert body.total_bytes() == len("héllo".encode())

    @pytest.mark.parametrize("value", [b"12345", bytearray(b"12345"), memoryview(b"12345")])
    def test_binary(self, value: bytes) -> None:
        body = extract_body(value)
        assert isinstance(body, BytesBody)
        assert body.content_type() is None
        assert body.total_bytes() == 5

    def test_mapping_is_form(self) -> None:
        body = extract_body({"a": "1", "b": "two words"})
        assert isinstance(body, FormBody)
        assert body.content_type() == FORM_CONTENT_TYPE
        assert body.read() == b"a=1&b=two+words"

    def test_pair_list_is_form(self) -> None:
        body = extract_body([("a", 1), ("a", 2)])
        assert isinstance(body, FormBody)
        assert body.fields == (("a", "1"), ("a", "2"))

    def test_file_is_stream(self) -> None:
        body = extract_body(io.BytesIO(b"data"))
        assert isinstance(body, StreamBody)
        assert body.total_bytes() is None
        assert body.read() == b"data"

    def test_chunk_iterable_is_stream(self) -> None:
        body = extract_body([b"a", b"b"])
        assert isinstance(body, StreamBody)
        assert body.read() == b"ab"

    def test_body_passes_through(self) -> None:
        body = BytesBody(b"x")
        assert extract_body(body) is body

    def test_unsupported(self) -> None:
        with pytest.raises(TypeError):
            extract_body(42)


class TestBytesBody:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(BytesBody(b""), Body)
        assert isinstance(chunks(), Body)

    def test_empty_body_has_content(self) -> None:
        body = BytesBody(b"")
        assert body.has_content() is True
        assert body.total_bytes() == 0

    def test_read_once(self) -> None:
        body = BytesBody(b"abc")
        assert body.read() == b"abc"
        assert body.body_used is True
        with pytest.raises(BodyUsedError):
            body.read()

    def test_clone_is_independent(self) -> None:
        body = BytesBody(b"abc", "text/x")
        copy = body.clone()
        assert copy.read() == b"abc"
        assert body.read() == b"abc"
        assert copy.content_type() == "text/x"

    def test_clone_after_read(self) -> None:
        body = BytesBody(b"abc", "text/x")
        body.read()
        copy = body.clone()
        assert copy.body_used is False
        assert copy.read() == b"abc"
        assert copy.content_type() == "text/x"

    def test_form_clone_after_read(self) -> None:
        body = FormBody([("k", "v")])
        body.read()
        assert body.clone().read() == b"k=v"

    def test_form_clone_keeps_type(self) -> None:
        copy = FormBody([("k", "v")]).clone()
        assert isinstance(copy, FormBody)
        assert copy.read() == b"k=v"


class TestStreamBody:
    def test_text_file_is_encoded(self) -> None:
        body = StreamBody(io.StringIO("héllo"))
        assert body.read() == "héllo".encode()

    def test_iter_bytes_marks_used(self) -> None:
        body = chunks(b"a", b"b")
        it = body.iter_bytes()
        assert body.body_used is True
        assert list(it) == [b"a", b"b"]

    def test_clone_tees_source(self) -> None:
        body = chunks(b"ab", b"cd")
        copy = body.clone()
        assert copy.read() == b"abcd"
        assert body.read() == b"abcd"

    def test_clone_of_clone(self) -> None:
        body = chunks(b"x")
        first = body.clone()
        second = first.clone()
        assert [b.read() for b in (body, first, second)] == [b"x", b"x", b"x"]

    def test_read_once(self) -> None:
        body = chunks(b"x")
        body.read()
        with pytest.raises(BodyUsedError):
            body.read()
        with pytest.raises(BodyUsedError):
            body.clone()

    def test_content_type_hint(self) -> None:
        assert StreamBody(iter([b"{}"]), "application/json").content_type() == "application/json"
