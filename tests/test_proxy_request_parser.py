"""Tests for the dependency request parser."""

import pytest

from depshare.proxy.errors import MalformedRequestError
from depshare.proxy.request_parser import RequestParser

ORIGIN = "http://localhost:8080"
REFERRER = "http://localhost:8080/mf1/index.js"


class TestRequestParser:
    """Tests for indirection URL parsing."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = RequestParser()

    def test_non_matching_path_returns_none(self):
        assert self.parser.parse(f"{ORIGIN}/mf1/index.js", REFERRER) is None
        assert self.parser.matches(f"{ORIGIN}/mf1/index.js") is False

    def test_full_request(self):
        url = f"{ORIGIN}/deps:react?path=./node_modules/react/index.js&provided=17.0.2&demanded=%5E17.0.0"
        result = self.parser.parse(url, REFERRER)

        assert self.parser.matches(url) is True
        assert result.key == "react"
        assert result.path == "./node_modules/react/index.js"
        assert result.provided == "17.0.2"
        assert result.demanded == "^17.0.0"
        assert result.raw_url == url
        assert result.candidate_target == "http://localhost:8080/mf1/node_modules/react/index.js"

    def test_version_alias(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=lib.js&version=1.0.0", REFERRER)
        assert result.provided == "1.0.0"

    def test_provided_wins_over_version(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=lib.js&version=1.0.0&provided=2.0.0", REFERRER)
        assert result.provided == "2.0.0"

    def test_demanded_defaults_to_provided(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=lib.js&provided=1.4.0", REFERRER)
        assert result.demanded == "1.4.0"

    def test_empty_demanded_defaults_to_provided(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=lib.js&provided=1.4.0&demanded=", REFERRER)
        assert result.demanded == "1.4.0"

    def test_encoded_prefix(self):
        result = self.parser.parse(f"{ORIGIN}/deps%3Alib?path=lib.js&provided=1.0.0", REFERRER)
        assert result.key == "lib"

    def test_scoped_key(self):
        result = self.parser.parse(f"{ORIGIN}/deps:@scope/pkg?path=pkg.js&provided=1.0.0", REFERRER)
        assert result.key == "@scope/pkg"

    def test_absolute_path_parameter(self):
        result = self.parser.parse(
            f"{ORIGIN}/deps:lib?path=https%3A%2F%2Fcdn.example.com%2Flib.js&provided=1.0.0", REFERRER
        )
        assert result.candidate_target == "https://cdn.example.com/lib.js"

    def test_missing_referrer_uses_request_url(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=/shared/lib.js&provided=1.0.0")
        assert result.candidate_target == "http://localhost:8080/shared/lib.js"

    def test_relative_referrer_is_ignored(self):
        result = self.parser.parse(f"{ORIGIN}/deps:lib?path=/shared/lib.js&provided=1.0.0", "/mf1/")
        assert result.candidate_target == "http://localhost:8080/shared/lib.js"

    def test_missing_path(self):
        with pytest.raises(MalformedRequestError) as exc_info:
            self.parser.parse(f"{ORIGIN}/deps:lib?provided=1.0.0", REFERRER)
        assert "path" in exc_info.value.reason

    def test_missing_version(self):
        with pytest.raises(MalformedRequestError):
            self.parser.parse(f"{ORIGIN}/deps:lib?path=lib.js", REFERRER)

    def test_missing_key(self):
        with pytest.raises(MalformedRequestError):
            self.parser.parse(f"{ORIGIN}/deps:?path=lib.js&provided=1.0.0", REFERRER)


class TestRequestParserPrefix:
    """Tests for custom prefixes."""

    def test_custom_prefix(self):
        parser = RequestParser("/_shared/")
        assert parser.prefix == "/_shared/"
        result = parser.parse(f"{ORIGIN}/_shared/lib?path=lib.js&provided=1.0.0", REFERRER)
        assert result.key == "lib"
        assert parser.parse(f"{ORIGIN}/deps:lib?path=lib.js&provided=1.0.0", REFERRER) is None

    def test_prefix_gets_leading_slash(self):
        assert RequestParser("deps:").prefix == "/deps:"
