"""Tests for lenient error body decoding."""

import pytest

from opsgenie_sdk.types import ApiErrorBody


class TestApiErrorBody:
    def test_full_document(self):
        """A well-formed body decodes every field."""
        body = ApiErrorBody.parse_lenient(
            b'{"message":"Rate limit exceeded","took":0.001,'
            b'"requestId":"rid-429","errors":{"quota":"exceeded"}}'
        )
        assert body.message == "Rate limit exceeded"
        assert body.took == pytest.approx(0.001)
        assert body.request_id == "rid-429"
        assert body.errors == {"quota": "exceeded"}

    def test_unknown_keys_ignored(self):
        """Extra keys in the body never break decoding."""
        body = ApiErrorBody.parse_lenient(b'{"message":"m","result":"x","code":40}')
        assert body.message == "m"

    @pytest.mark.parametrize("raw", [b"", b"<html>bad gateway</html>", b"[1, 2]", b"null"])
    def test_non_object_bodies_decode_empty(self, raw):
        """Empty, non-JSON and non-object bodies yield an empty model."""
        body = ApiErrorBody.parse_lenient(raw)
        assert body == ApiErrorBody()
        assert body.errors is None

    def test_malformed_field_keeps_the_others(self):
        """One badly typed field does not discard the rest of the body."""
        body = ApiErrorBody.parse_lenient(
            b'{"message":"Invalid","took":"slow","requestId":"rid-7"}'
        )
        assert body.message == "Invalid"
        assert body.request_id == "rid-7"
        assert body.took == 0.0

    def test_populate_by_name(self):
        """The model can be built with python field names."""
        assert ApiErrorBody(request_id="r").request_id == "r"
