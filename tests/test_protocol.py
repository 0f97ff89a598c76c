"""
Unit tests for the Sans-I/O protocol layer.

These tests verify request building without any socket involved.
All tests are pure - they test data transformations only.
"""

import pytest

from rawdav.protocol import (
    # Types
    BAD_RESPONSE,
    DAVMethod,
    DAVRequest,
    DAVResponse,
    # Builders
    build_form_body,
    build_lock_body,
    build_request,
    # Protocol
    WebDAVProtocol,
)
from rawdav.lib import error


def split_request(raw: bytes):
    """Returns (request line, list of header lines, rest after the blank line)"""
    head, sep, rest = raw.partition(b"\r\n\r\n")
    assert sep
    lines = head.decode("utf-8").split("\r\n")
    return lines[0], lines[1:], rest


class TestDAVTypes:
    """Test core DAV types."""

    def test_dav_request_immutable(self):
        """DAVRequest should be immutable (frozen dataclass)."""
        request = DAVRequest(method=DAVMethod.GET, target="/", headers={})
        with pytest.raises(AttributeError):
            request.target = "/other"

    def test_dav_request_with_header(self):
        """with_header should return new request with added header."""
        request = DAVRequest(
            method=DAVMethod.GET,
            target="/",
            headers={"Accept": "text/html"},
        )
        new_request = request.with_header("Cookie", "session=42")

        assert "Cookie" not in request.headers
        assert new_request.headers["Accept"] == "text/html"
        assert new_request.headers["Cookie"] == "session=42"

    def test_dav_request_with_body(self):
        request = DAVRequest(DAVMethod.PUT, "/a.txt", headers={"X-A": "1"})
        new_request = request.with_body(b"hello")

        assert request.body is None
        assert new_request.body == b"hello"
        assert new_request.headers == {"X-A": "1"}
        assert new_request.method == DAVMethod.PUT
        assert new_request.target == "/a.txt"

    def test_dav_request_method_name(self):
        assert DAVRequest(DAVMethod.PROPFIND, "/").method_name == "PROPFIND"
        assert DAVRequest("REPORT", "/").method_name == "REPORT"

    def test_twelve_methods(self):
        assert {m.value for m in DAVMethod} == {
            "HEAD", "GET", "OPTIONS", "POST", "PUT", "MOVE",
            "COPY", "MKCOL", "DELETE", "PROPFIND", "LOCK", "UNLOCK",
        }

    def test_dav_response_ok(self):
        """ok property should return True for 2xx status codes."""
        assert DAVResponse(status=200).ok
        assert DAVResponse(status=207).ok
        assert not DAVResponse(status=404).ok
        assert not DAVResponse(status=BAD_RESPONSE).ok

    def test_dav_response_flags(self):
        assert DAVResponse(status=207).is_multistatus
        assert not DAVResponse(status=200).is_multistatus
        assert DAVResponse(status=BAD_RESPONSE).bad_response
        assert not DAVResponse(status=200).bad_response

    def test_dav_response_text_uses_charset(self):
        response = DAVResponse(
            status=200,
            headers={"Content-Type": "text/plain; charset=iso-8859-1"},
            body="blåbær".encode("iso-8859-1"),
        )
        assert response.text == "blåbær"
        assert DAVResponse(status=200, body="blåbær".encode()).text == "blåbær"

    def test_validate_status(self):
        response = DAVResponse(status=201, reason="Created")
        assert response.validate_status("put") is response

        with pytest.raises(error.AuthorizationError):
            DAVResponse(status=401, reason="Unauthorized").validate_status("get")
        with pytest.raises(error.AuthorizationError):
            DAVResponse(status=403).validate_status()
        with pytest.raises(error.NotFoundError):
            DAVResponse(status=404).validate_status("propfind", url="/x")
        with pytest.raises(error.MkcolError):
            DAVResponse(status=405, reason="Method Not Allowed").validate_status("mkcol")
        with pytest.raises(error.LockError):
            DAVResponse(status=423, reason="Locked").validate_status("LOCK")
        with pytest.raises(error.ResponseError):
            DAVResponse(status=500).validate_status("head")
        with pytest.raises(error.ResponseError):
            DAVResponse(status=BAD_RESPONSE).validate_status("put")

    def test_error_str(self):
        e = error.PutError(url="/a.txt", reason="disk full")
        assert str(e) == "PutError at '/a.txt', reason disk full"


class TestBuildRequest:
    """Test the HTTP/1.0 request builder."""

    def test_no_body(self):
        raw = build_request(DAVMethod.GET, "/index.html")
        assert raw == b"GET /index.html HTTP/1.0\r\n\r\n"

    def test_headers_in_order(self):
        raw = build_request(
            "MOVE", "/a", {"Overwrite": "T", "Destination": "/b", "X-Count": 3}
        )
        assert raw == (
            b"MOVE /a HTTP/1.0\r\n"
            b"Overwrite: T\r\n"
            b"Destination: /b\r\n"
            b"X-Count: 3\r\n"
            b"\r\n"
        )

    def test_body_gets_content_length(self):
        raw = build_request(DAVMethod.PUT, "/f.bin", {}, b"\x00\x01\x02")
        assert raw == (
            b"PUT /f.bin HTTP/1.0\r\n"
            b"Content-Length: 3\r\n"
            b"\r\n"
            b"\x00\x01\x02"
            b"\r\n"
        )

    def test_str_body_counted_in_bytes(self):
        raw = build_request(DAVMethod.PUT, "/f.txt", {}, "blåbær")
        request_line, headers, rest = split_request(raw)
        assert "Content-Length: 8" in headers
        assert rest == "blåbær".encode("utf-8") + b"\r\n"

    def test_caller_content_length_replaced(self):
        raw = build_request(
            DAVMethod.PUT, "/f", {"content-length": "999", "X-A": "1"}, b"abc"
        )
        _, headers, _ = split_request(raw)
        assert headers == ["X-A: 1", "Content-Length: 3"]

    def test_empty_body_is_no_body(self):
        assert build_request(DAVMethod.PUT, "/f", {}, b"") == b"PUT /f HTTP/1.0\r\n\r\n"
        assert build_request(DAVMethod.PUT, "/f", {}, None) == b"PUT /f HTTP/1.0\r\n\r\n"

    @pytest.mark.parametrize(
        "method,target,headers,body",
        [
            (DAVMethod.HEAD, "/", {}, None),
            (DAVMethod.PROPFIND, "/dir/", {"Depth": 1}, None),
            (DAVMethod.PUT, "/x", {"X-Foo": "bar"}, b"payload\r\n\r\nwith blank lines"),
            (DAVMethod.LOCK, "/x", {}, build_lock_body("exclusive", "write", "http://me")),
            ("FROB", "weird target", {"A": None}, "text"),
        ],
    )
    def test_header_block_and_content_length(self, method, target, headers, body):
        raw = build_request(method, target, headers, body)
        request_line, header_lines, rest = split_request(raw)
        assert request_line.endswith(" HTTP/1.0")
        assert all(line for line in header_lines)
        lengths = [x for x in header_lines if x.startswith("Content-Length: ")]
        if body:
            wire_body = body.encode("utf-8") if isinstance(body, str) else body
            assert lengths == [f"Content-Length: {len(wire_body)}"]
            assert rest == wire_body + b"\r\n"
        else:
            assert lengths == []
            assert rest == b""

    def test_deterministic(self):
        args = (DAVMethod.POST, "/login", {"Content-Type": "x"}, b"a=b")
        assert build_request(*args) == build_request(*args)


class TestBodyBuilders:
    def test_form_body(self):
        body = build_form_body({"login": "tiger", "password": "secret"})
        assert body == b"login=tiger&password=secret"

    def test_form_body_escapes(self):
        body = build_form_body({"name": "Ole Olsen", "q": "a&b=c", "n": 5})
        assert body == b"name=Ole+Olsen&q=a%26b%3Dc&n=5"

    def test_lock_body(self):
        body = build_lock_body("exclusive", "write", "http://example.com/~tiger")
        assert body == (
            b'<?xml version="1.0" encoding="utf-8" ?>\n'
            b"<D:lockinfo xmlns:D='DAV:'>\n"
            b"<D:lockscope><D:exclusive/></D:lockscope>\n"
            b"<D:locktype><D:write/></D:locktype>\n"
            b"\t<D:owner><D:href>http://example.com/~tiger</D:href></D:owner>\n"
            b"</D:lockinfo>\n"
        )


class TestWebDAVProtocol:
    """Test the verb to request mapping."""

    def setup_method(self):
        self.protocol = WebDAVProtocol()

    @pytest.mark.parametrize("verb", ["head", "get", "options", "mkcol", "delete"])
    def test_plain_verbs(self, verb):
        request = getattr(self.protocol, verb + "_request")("/res")
        assert request.method == DAVMethod[verb.upper()]
        assert request.target == "/res"
        assert request.headers == {}
        assert request.body is None

    def test_post_form(self):
        request = self.protocol.post_request(
            "/login.php", {"login": "tiger", "password": "secret"}
        )
        assert request.method == DAVMethod.POST
        assert request.body == b"login=tiger&password=secret"
        assert request.headers == {"Content-Type": "application/x-www-form-urlencoded"}
        raw = build_request(request.method, request.target, request.headers, request.body)
        assert b"Content-Type: application/x-www-form-urlencoded\r\n" in raw
        assert raw.endswith(b"\r\n\r\nlogin=tiger&password=secret\r\n")

    def test_post_raw_and_empty(self):
        assert self.protocol.post_request("/p", "a=1").body == b"a=1"
        assert self.protocol.post_request("/p", b"a=1").body == b"a=1"
        request = self.protocol.post_request("/p")
        assert request.body is None
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_put(self):
        request = self.protocol.put_request("/a.txt", b"\xff\xfe")
        assert request.body == b"\xff\xfe"
        assert request.headers == {}
        assert self.protocol.put_request("/a.txt", "hei").body == b"hei"

    @pytest.mark.parametrize("verb", ["move", "copy"])
    def test_move_copy(self, verb):
        request = getattr(self.protocol, verb + "_request")("/a", "/b")
        assert request.method == DAVMethod[verb.upper()]
        assert request.target == "/a"
        assert list(request.headers.items()) == [("Overwrite", "T"), ("Destination", "/b")]

        request = getattr(self.protocol, verb + "_request")("/a", "/b", overwrite=False)
        assert request.headers["Overwrite"] == "F"

    def test_propfind_depth(self):
        assert self.protocol.propfind_request("/d/").headers == {"Depth": 0}
        assert self.protocol.propfind_request("/d/", 1).headers == {"Depth": 1}
        request = self.protocol.propfind_request("/d/", "infinity")
        assert request.headers == {"Depth": "Infinity"}
        assert request.body is None

    def test_propfind_with_body(self):
        body = '<?xml version="1.0"?><D:propfind xmlns:D="DAV:"><D:prop><D:getetag/></D:prop></D:propfind>'
        request = self.protocol.propfind_request("/d/", 1, body=body)
        assert request.body == body.encode("utf-8")
        assert request.headers["Content-Type"] == "text/xml; charset=utf-8"
        assert request.headers["Depth"] == 1

    def test_lock(self):
        request = self.protocol.lock_request("/doc", "shared", "write", "mailto:tiger@example.com")
        assert request.method == DAVMethod.LOCK
        assert request.headers == {}
        assert b"<D:lockscope><D:shared/></D:lockscope>" in request.body
        assert b"<D:href>mailto:tiger@example.com</D:href>" in request.body

    def test_unlock(self):
        token = "opaquelocktoken:e71d4fae-5dec-22d6-fea5-00a0c91e6be4"
        request = self.protocol.unlock_request("/doc", token)
        assert request.method == DAVMethod.UNLOCK
        assert request.headers == {"Lock-Token": f"<{token}>"}

    def test_default_and_call_headers(self):
        protocol = WebDAVProtocol(headers={"Authorization": "Basic abc", "Cookie": "a=1"})
        request = protocol.move_request("/a", "/b", headers={"Cookie": "a=2"})
        assert list(request.headers.items()) == [
            ("Authorization", "Basic abc"),
            ("Cookie", "a=2"),
            ("Overwrite", "T"),
            ("Destination", "/b"),
        ]
        ## the default headers are not modified by a call
        assert protocol.headers == {"Authorization": "Basic abc", "Cookie": "a=1"}

    def test_header_names_merge_ignoring_case(self):
        protocol = WebDAVProtocol(headers={"cookie": "a=1"})
        request = protocol.post_request(
            "/p", "x", headers={"COOKIE": "a=2", "content-type": "text/plain"}
        )
        assert request.headers == {
            "COOKIE": "a=2",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        raw = build_request(request.method, request.target, request.headers, request.body)
        assert raw.lower().count(b"content-type:") == 1
        assert raw.lower().count(b"cookie:") == 1

    def test_generic_request(self):
        request = self.protocol.request("PROPPATCH", "/x", {"X-A": "1"}, "<xml/>")
        assert request.method == "PROPPATCH"
        assert request.body == b"<xml/>"
        assert request.headers == {"X-A": "1"}
