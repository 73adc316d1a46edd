"""Tests for switchyard.http.response — Response chaining and Redirect."""

from switchyard.http.response import Redirect, Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response().with_status(201).status == 201

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert ("A", "1") in r.headers
        assert ("B", "2") in r.headers

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("application/json").content_type == "application/json"

    def test_chaining_returns_new_objects(self) -> None:
        r1 = Response("hello")
        r2 = r1.with_status(201)
        assert r1.status == 200
        assert r2.status == 201

    def test_text_decodes_bytes(self) -> None:
        assert Response(b"caf\xc3\xa9").text == "café"

    def test_header_lookup_case_insensitive(self) -> None:
        r = Response().with_header("Location", "/login")
        assert r.header("location") == "/login"
        assert r.header("X-Missing") is None


class TestRedirect:
    def test_defaults(self) -> None:
        r = Redirect("/login")
        assert r.url == "/login"
        assert r.status == 302
        assert r.headers == ()

    def test_custom_status(self) -> None:
        assert Redirect("/new", status=301).status == 301
