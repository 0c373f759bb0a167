"""
Tests for build_options: construction order and body precedence.
"""

import json
import logging

import pytest

from fluent_http.core.config import RequestExtras, RequestSpec
from fluent_http.core.options import build_options

BODY_KEYS = ("form_params", "json")


class TestConstructionOrder:

    def test_starts_from_copy_of_persistent(self):
        persistent = {"base_url": "https://api.example.com", "verify": False}
        opts = build_options("GET", RequestSpec(), persistent)

        assert opts["base_url"] == "https://api.example.com"
        assert opts["verify"] is False
        opts["verify"] = True
        assert persistent["verify"] is False

    def test_per_call_timeout_overrides_persistent(self):
        opts = build_options("GET", RequestSpec().with_timeout(7), {"timeout": 30})
        assert opts["timeout"] == 7

    def test_unset_timeout_keeps_persistent(self):
        opts = build_options("GET", RequestSpec().with_timeout(None), {"timeout": 30})
        assert opts["timeout"] == 30

    def test_proxy_applied_only_when_set(self):
        assert "proxy" not in build_options("GET", RequestSpec(), {})
        opts = build_options("GET", RequestSpec().with_proxy("http://p:1"), {})
        assert opts["proxy"] == "http://p:1"

    def test_headers_union_per_call_wins(self):
        persistent = {"headers": {"Accept": "text/html", "X-Keep": "yes"}}
        spec = RequestSpec().with_headers({"Accept": "application/json"})

        opts = build_options("GET", spec, persistent)

        assert opts["headers"] == {"Accept": "application/json", "X-Keep": "yes"}
        assert persistent["headers"]["Accept"] == "text/html"

    def test_no_per_call_headers_keeps_persistent_headers(self):
        opts = build_options("GET", RequestSpec(), {"headers": {"X-A": "1"}})
        assert opts["headers"] == {"X-A": "1"}

    def test_query_installed(self):
        opts = build_options("GET", RequestSpec(), {}, RequestExtras(query={"page": 2}))
        assert opts["query"] == {"page": 2}

    def test_empty_query_not_installed(self):
        assert "query" not in build_options("GET", RequestSpec(), {}, RequestExtras(query={}))

    def test_repeatable(self):
        """Одинаковые входы - одинаковый результат (важно для повторов)."""
        spec = RequestSpec().attach("f", b"x", "f.bin").with_headers({"X-A": "1"})
        extras = RequestExtras(data={"a": 1, "b": {"c": 2}})

        first = build_options("POST", spec, {}, extras)
        second = build_options("POST", spec, {}, extras)

        assert first == second
        assert first["multipart"] is not second["multipart"]


class TestBodyPrecedence:

    def test_post_without_json_flag_is_form(self):
        opts = build_options("POST", RequestSpec(), {}, RequestExtras(data={"name": "x"}))
        assert opts["form_params"] == {"name": "x"}
        assert "json" not in opts

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
    def test_json_flag_is_json(self, method):
        opts = build_options(method, RequestSpec(), {}, RequestExtras(data={"a": 1}, as_json=True))
        assert opts["json"] == {"a": 1}
        assert "form_params" not in opts

    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    def test_non_post_without_json_flag_drops_data(self, method, caplog):
        """Только POST получает неявную form-кодировку."""
        with caplog.at_level(logging.WARNING, logger="fluent_http.core.options"):
            opts = build_options(method, RequestSpec(), {}, RequestExtras(data={"a": 1}))

        for key in BODY_KEYS + ("body", "multipart"):
            assert key not in opts
        assert "Dropping request data" in caplog.text

    def test_method_case_insensitive(self):
        opts = build_options("post", RequestSpec(), {}, RequestExtras(data={"a": 1}))
        assert opts["form_params"] == {"a": 1}

    def test_raw_body_wins_over_data(self):
        spec = RequestSpec().with_body("raw-payload", "text/plain")
        opts = build_options("POST", spec, {}, RequestExtras(data={"a": 1}, as_json=True))

        assert opts["body"] == "raw-payload"
        for key in BODY_KEYS:
            assert key not in opts

    def test_persistent_body_also_wins_over_data(self):
        opts = build_options("POST", RequestSpec(), {"body": "from-options"}, RequestExtras(data={"a": 1}))
        assert opts["body"] == "from-options"
        assert "form_params" not in opts

    def test_content_type_from_with_body_folded_into_headers(self):
        spec = RequestSpec().with_body(b"\x00\x01", "application/octet-stream")
        opts = build_options("PUT", spec, {})
        assert opts["headers"]["Content-Type"] == "application/octet-stream"
        assert opts["body"] == b"\x00\x01"

    def test_multipart_absorbs_data(self):
        spec = RequestSpec().attach("file", b"bytes", "a.bin")
        data = {
            "title": "report",
            "count": 3,
            "ratio": 0.5,
            "draft": True,
            "hidden": False,
            "meta": {"tags": ["a", "b"]},
            "items": [1, 2],
            "nothing": None,
        }

        opts = build_options("POST", spec, {}, RequestExtras(data=data, as_json=True))

        assert opts["multipart"][0] == {"name": "file", "contents": b"bytes", "filename": "a.bin"}
        appended = {part["name"]: part["contents"] for part in opts["multipart"][1:]}
        assert appended == {
            "title": "report",
            "count": "3",
            "ratio": "0.5",
            "draft": "1",
            "hidden": "",
            "meta": json.dumps({"tags": ["a", "b"]}),
            "items": "[1, 2]",
            "nothing": "null",
        }
        for part in opts["multipart"][1:]:
            assert "filename" not in part
        for key in BODY_KEYS:
            assert key not in opts

    def test_multipart_beats_raw_body_for_data(self):
        spec = RequestSpec().with_body("raw").attach("a", "1")
        opts = build_options("POST", spec, {}, RequestExtras(data={"b": 2}))

        assert [p["name"] for p in opts["multipart"]] == ["a", "b"]
        assert opts["body"] == "raw"
        assert "form_params" not in opts

    def test_multipart_does_not_leak_into_spec(self):
        spec = RequestSpec().attach("a", "1")
        build_options("POST", spec, {}, RequestExtras(data={"b": 2}))
        assert len(spec.multipart) == 1

    def test_get_never_has_data_payload(self):
        opts = build_options("GET", RequestSpec(), {}, RequestExtras(query={"q": "x"}))
        assert opts["query"] == {"q": "x"}
        for key in BODY_KEYS + ("body",):
            assert key not in opts

    def test_empty_data_is_ignored(self):
        opts = build_options("POST", RequestSpec(), {}, RequestExtras(data={}))
        for key in BODY_KEYS:
            assert key not in opts
