"""Tests for false-positive suppression rules."""

import pytest

from linkaudit.heuristics import (
    EXCEPTION_RULES,
    RESPONSE_RULES,
    base_verdict,
    classify_exception,
    classify_response,
    has_challenge_marker,
    indicates_login,
    is_account_path,
    is_social_domain,
)
from linkaudit.models import LinkStatus
from linkaudit.probers import ProbeResponse


def resp(status, url="https://shop.example/page", body="", headers=None):
    return ProbeResponse(status=status, url=url, headers=headers or {}, body=body)


class TestPredicates:
    """Tests for individual predicates."""

    @pytest.mark.parametrize("url", [
        "https://facebook.com/shop",
        "https://www.facebook.com/shop",
        "https://m.youtube.com/watch?v=1",
        "https://x.com/shop",
        "https://www.linkedin.com/company/shop",
        "https://pinterest.com/shop/",
    ])
    def test_social_domains(self, url):
        assert is_social_domain(url)

    @pytest.mark.parametrize("url", [
        "https://notfacebook.com/",
        "https://facebook.com.evil.example/",
        "https://box.com/",
        "/relative/path",
    ])
    def test_not_social_domains(self, url):
        assert not is_social_domain(url)

    def test_custom_social_domains(self):
        assert is_social_domain("https://www.tiktok.com/@shop", ["tiktok.com"])
        assert not is_social_domain("https://www.facebook.com/shop", ["tiktok.com"])

    def test_challenge_marker_case_insensitive(self):
        assert has_challenge_marker("<div id='CF-Browser-Verification'>")
        assert has_challenge_marker('<script src="/cdn-cgi/challenge-platform/h/b/orchestrate"></script>')
        assert not has_challenge_marker("<h1>Page not found</h1>")

    def test_indicates_login_from_url(self):
        assert indicates_login("https://shop.example/Login.aspx?ReturnUrl=/account", "")
        assert indicates_login("https://shop.example/auth?next=/sign-in", "")
        assert not indicates_login("https://shop.example/wines", "")

    def test_indicates_login_from_body(self):
        assert indicates_login("https://shop.example/x", "<title>Sign In | Shop</title>")
        assert indicates_login("https://shop.example/x", '<input type="password" name="pw">')
        assert not indicates_login("https://shop.example/x", "<title>Forbidden</title>")

    def test_account_path(self):
        assert is_account_path("https://shop.example/my-account/orders")
        assert is_account_path("https://shop.example/auth/callback")
        assert not is_account_path("https://shop.example/wines/red")
        assert not is_account_path("https://login.example/")


class TestResponseRules:
    """Tests for response classification order."""

    def test_rule_order(self):
        assert [r.name for r in RESPONSE_RULES] == [
            "cdn_challenge", "auth_gate", "redirect", "social_block",
        ]
        assert [r.name for r in EXCEPTION_RULES] == [
            "cdn_challenge", "auth_gate", "social_block",
        ]

    @pytest.mark.parametrize("status", [200, 204, 301, 304, 399])
    def test_base_verdict_ok(self, status):
        assert base_verdict(status).status == LinkStatus.OK

    @pytest.mark.parametrize("status", [199, 400, 404, 410, 500])
    def test_base_verdict_broken(self, status):
        assert base_verdict(status).status == LinkStatus.BROKEN

    def test_plain_ok(self):
        verdict = classify_response("https://shop.example/", resp(200))
        assert verdict.status == LinkStatus.OK
        assert verdict.note is None
        assert verdict.rule == "status"

    def test_challenge_wins_over_auth(self):
        verdict = classify_response(
            "https://shop.example/account",
            resp(403, url="https://shop.example/login"),
        )
        assert verdict.rule == "cdn_challenge"

    def test_challenge_body_on_other_status(self):
        verdict = classify_response(
            "https://shop.example/",
            resp(429, body="<title>Attention Required! | Cloudflare</title>"),
        )
        assert verdict.status == LinkStatus.OK
        assert verdict.rule == "cdn_challenge"

    def test_challenge_marker_ignored_on_success(self):
        verdict = classify_response(
            "https://shop.example/blog/cdn",
            resp(200, body="<p>Just a moment... deals are loading</p>", headers={"cf-mitigated": "challenge"}),
        )
        assert verdict.rule == "status"
        assert verdict.note is None

    def test_auth_gate_login_arm_without_challenge_rule(self):
        auth_gate = next(r for r in RESPONSE_RULES if r.name == "auth_gate")
        login_403 = resp(403, url="https://shop.example/login?next=/account")

        assert auth_gate.predicate("https://shop.example/account", login_403, ())
        assert not auth_gate.predicate("https://shop.example/wines", resp(403), ())
        assert classify_response("https://shop.example/account", login_403).rule == "cdn_challenge"

    def test_unauthorized(self):
        verdict = classify_response("https://shop.example/account", resp(401))
        assert verdict.rule == "auth_gate"
        assert verdict.status == LinkStatus.OK

    def test_redirect_follows(self):
        verdict = classify_response(
            "https://shop.example/old",
            resp(308, headers={"location": "/new"}),
        )
        assert verdict.rule == "redirect"
        assert verdict.follow_redirect

    def test_social_block_uses_final_url(self):
        verdict = classify_response(
            "https://shop.example/go/facebook",
            resp(400, url="https://www.facebook.com/shop"),
        )
        assert verdict.rule == "social_block"

    def test_not_found(self):
        verdict = classify_response("https://shop.example/gone", resp(404))
        assert verdict.status == LinkStatus.BROKEN
        assert verdict.note is None

    def test_social_rule_respects_allowlist(self):
        verdict = classify_response(
            "https://www.facebook.com/shop", resp(400, url="https://www.facebook.com/shop"),
            social_domains=("tiktok.com",),
        )
        assert verdict.status == LinkStatus.BROKEN


class TestExceptionRules:
    """Tests for transport-exception classification."""

    def test_genuine_failure(self):
        assert classify_exception("https://shop.example/", "net::ERR_NAME_NOT_RESOLVED") is None

    def test_challenge_message(self):
        verdict = classify_exception("https://shop.example/", "Cloudflare challenge page returned")
        assert verdict.rule == "cdn_challenge"

    def test_auth_status_requires_account_path(self):
        assert classify_exception("https://shop.example/signin", "HTTP 401 Unauthorized").rule == "auth_gate"
        assert classify_exception("https://shop.example/wines", "HTTP 401 Unauthorized") is None

    def test_status_must_be_whole_number(self):
        assert classify_exception("https://shop.example/account", "error code 14010") is None

    def test_social_bad_request(self):
        verdict = classify_exception("https://twitter.com/shop", "Bad Request")
        assert verdict.rule == "social_block"
        assert classify_exception("https://shop.example/", "Bad Request") is None
