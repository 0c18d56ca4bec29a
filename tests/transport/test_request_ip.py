"""Tests for client IP extraction from proxy headers."""

import pytest
from starlette.datastructures import Headers

from folio.transport.request_ip import ANONYMOUS_IP, get_request_ip


class TestGetRequestIp:
    """Tests for get_request_ip."""

    def test_first_forwarded_hop_wins(self) -> None:
        headers = Headers({"X-Forwarded-For": "203.0.113.9, 10.0.0.1", "X-Real-IP": "10.0.0.2"})
        assert get_request_ip(headers) == "203.0.113.9"

    def test_real_ip_used_when_no_forwarded_for(self) -> None:
        assert get_request_ip(Headers({"X-Real-IP": " 198.51.100.7 "})) == "198.51.100.7"

    def test_ipv6_is_preserved(self) -> None:
        assert get_request_ip(Headers({"x-forwarded-for": "2001:DB8::1"})) == "2001:DB8::1"

    def test_unknown_token_is_skipped(self) -> None:
        headers = Headers({"X-Forwarded-For": "unknown", "X-Real-IP": "198.51.100.7"})
        assert get_request_ip(headers) == "198.51.100.7"

    def test_unsafe_characters_are_removed(self) -> None:
        assert get_request_ip(Headers({"X-Real-IP": "1.2.3.4<script>"})) == "1.2.3.4c"

    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"X-Forwarded-For": ""},
            {"X-Forwarded-For": "unknown"},
            {"X-Real-IP": "zzz"},
            {"X-Forwarded-For": " , 1.2.3.4"},
        ],
    )
    def test_falls_back_to_anonymous(self, headers: dict[str, str]) -> None:
        assert get_request_ip(Headers(headers)) == ANONYMOUS_IP

    def test_token_is_bounded(self) -> None:
        assert len(get_request_ip(Headers({"X-Real-IP": "1" * 200}))) == 80
