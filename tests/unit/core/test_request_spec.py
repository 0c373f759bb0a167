"""Тесты RequestSpec, RetryPolicy и ClientConfig."""

import pytest

from fluent_http.core.config import (
    ClientConfig,
    DEFAULT_TIMEOUT,
    Part,
    RequestSpec,
    RetryPolicy,
)


class TestRetryPolicy:

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.times == 0
        assert policy.sleep_ms == 0
        assert policy.attempts == 1

    def test_attempts_include_first_try(self):
        assert RetryPolicy(times=2, sleep_ms=100).attempts == 3

    def test_sleep_seconds(self):
        assert RetryPolicy(times=1, sleep_ms=250).sleep_seconds == 0.25

    @pytest.mark.parametrize("times, sleep_ms", [(-1, 0), (0, -5)])
    def test_negative_values_rejected(self, times, sleep_ms):
        with pytest.raises(ValueError):
            RetryPolicy(times=times, sleep_ms=sleep_ms)


class TestRequestSpec:

    def test_defaults(self):
        spec = RequestSpec()
        assert dict(spec.headers) == {}
        assert spec.token is None
        assert spec.body is None
        assert spec.multipart == ()
        assert spec.timeout == DEFAULT_TIMEOUT == 3.0
        assert spec.retry == RetryPolicy()
        assert spec.proxy is None
        assert spec.is_default()

    def test_with_methods_do_not_mutate_receiver(self):
        """Каждый with_* возвращает новый экземпляр."""
        original = RequestSpec()
        changed = (
            original.with_headers({"X-A": "1"})
            .with_proxy("http://proxy:8080")
            .with_retry(2, 50)
            .with_timeout(10)
        )

        assert original.is_default()
        assert changed is not original
        assert changed.headers["X-A"] == "1"
        assert changed.proxy == "http://proxy:8080"
        assert changed.retry == RetryPolicy(2, 50)
        assert changed.timeout == 10

    def test_headers_merge_last_write_wins(self):
        spec = RequestSpec().with_headers({"X-A": "1", "X-B": "2"}).with_headers({"X-A": "3"})
        assert dict(spec.headers) == {"X-A": "3", "X-B": "2"}

    def test_headers_are_read_only(self):
        spec = RequestSpec().with_headers({"X-A": "1"})
        with pytest.raises(TypeError):
            spec.headers["X-A"] = "2"

    def test_with_token_projects_authorization_header(self):
        spec = RequestSpec().with_token("abc")
        assert spec.token == "abc"
        assert spec.headers["Authorization"] == "Bearer abc"

    def test_with_token_custom_type(self):
        spec = RequestSpec().with_token("xyz", type="Token")
        assert spec.headers["Authorization"] == "Token xyz"

    def test_with_body_sets_content_type(self):
        spec = RequestSpec().with_body("<xml/>", "application/xml")
        assert spec.body == "<xml/>"
        assert spec.headers["Content-Type"] == "application/xml"

    def test_with_body_default_content_type(self):
        assert RequestSpec().with_body("raw").headers["Content-Type"] == "text/plain"

    def test_attach_keeps_order(self):
        spec = RequestSpec().attach("a", "1").attach("file", b"data", "f.bin")
        assert spec.multipart == (Part("a", "1"), Part("file", b"data", "f.bin"))

    def test_part_as_dict_omits_missing_filename(self):
        assert Part("a", "1").as_dict() == {"name": "a", "contents": "1"}
        assert Part("f", b"x", "f.txt").as_dict() == {"name": "f", "contents": b"x", "filename": "f.txt"}

    def test_timeout_none_means_unset(self):
        assert RequestSpec().with_timeout(None).timeout is None

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_timeout_rejected(self, value):
        with pytest.raises(ValueError):
            RequestSpec().with_timeout(value)

    def test_negative_retry_rejected(self):
        with pytest.raises(ValueError):
            RequestSpec().with_retry(-1)

    def test_frozen(self):
        spec = RequestSpec()
        with pytest.raises(Exception):
            spec.proxy = "http://proxy"  # type: ignore[misc]


class TestClientConfig:

    def test_create_merges_kwargs(self):
        config = ClientConfig.create({"base_url": "https://a.example.com"}, verify=False)
        assert dict(config.options) == {"base_url": "https://a.example.com", "verify": False}
        assert config.base_url == "https://a.example.com"

    def test_with_options_returns_new_config(self):
        config = ClientConfig.create({"base_url": "https://a.example.com", "verify": True})
        updated = config.with_options({"verify": False, "headers": {"X-A": "1"}})

        assert config.options["verify"] is True
        assert updated.options["verify"] is False
        assert updated.options["base_url"] == "https://a.example.com"
        assert updated.options["headers"] == {"X-A": "1"}

    def test_options_are_read_only(self):
        config = ClientConfig.create({"verify": True})
        with pytest.raises(TypeError):
            config.options["verify"] = False

    def test_invalid_default_timeout(self):
        with pytest.raises(ValueError):
            ClientConfig.create(default_timeout=0)

    def test_invalid_options_timeout(self):
        with pytest.raises(ValueError):
            ClientConfig.create({"timeout": 0})

    def test_options_timeout_wins_for_reset(self):
        assert ClientConfig.create({"timeout": 10}, default_timeout=5).reset_timeout == 10
        assert ClientConfig.create(default_timeout=5).reset_timeout == 5
