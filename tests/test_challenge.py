"""
Tests for WWW-Authenticate challenge parsing.

Covers both supported schemes, the failure modes of malformed headers, and
token endpoint URL composition.
"""
from __future__ import annotations

import dataclasses
import logging

import pytest

from registry_auth.challenge import BasicChallenge, BearerChallenge, parse_www_authenticate
from registry_auth.errors import MissingRequiredField, ParseError


class TestParseBearer:
    """Test parsing of Bearer challenges."""

    def test_bearer_with_all_fields(self):
        """Test that realm, service and scope are all captured."""
        challenge = parse_www_authenticate('Bearer realm="R",service="S",scope="SC"')
        assert challenge == BearerChallenge(realm="R", service="S", scope="SC")

    def test_bearer_from_raw_bytes(self):
        """Test a realistic header given as raw bytes."""
        realm = "https://sat-r220-02.lab.eng.rdu2.redhat.com/v2/token"
        service = "sat-r220-02.lab.eng.rdu2.redhat.com"
        scope = "repository:registry:pull,push"
        header = f'Bearer realm="{realm}",service="{service}",scope="{scope}"'.encode()

        assert parse_www_authenticate(header) == BearerChallenge(realm=realm, service=service, scope=scope)

    def test_bearer_realm_only(self):
        """Test that service and scope are optional."""
        challenge = parse_www_authenticate('Bearer realm="https://auth.example.com/token"')
        assert challenge == BearerChallenge(realm="https://auth.example.com/token")
        assert challenge.service is None
        assert challenge.scope is None

    def test_attribute_order_is_irrelevant(self):
        """Test that attributes may appear in any order."""
        challenge = parse_www_authenticate('Bearer scope="SC", service="S", realm="R"')
        assert challenge == BearerChallenge(realm="R", service="S", scope="SC")

    def test_whitespace_around_equals_and_commas(self):
        """Test tolerance for whitespace between tokens."""
        challenge = parse_www_authenticate('  Bearer realm = "R" ,  service="S"')
        assert challenge == BearerChallenge(realm="R", service="S")

    def test_duplicate_keys_first_wins(self):
        """Test that the first occurrence of a repeated key is kept."""
        challenge = parse_www_authenticate('Bearer realm="first",realm="second"')
        assert challenge.realm == "first"

    def test_unsupported_keys_are_ignored_and_logged(self, caplog):
        """Test that vendor attributes do not fail parsing but are reported."""
        header = 'Bearer realm="R",error="insufficient_scope",scope="SC"'
        with caplog.at_level(logging.WARNING, logger="registry_auth.challenge"):
            challenge = parse_www_authenticate(header)

        assert challenge == BearerChallenge(realm="R", scope="SC")
        assert "error" in caplog.text

    def test_missing_realm_raises(self):
        """Test that a Bearer challenge without realm is rejected."""
        with pytest.raises(MissingRequiredField) as exc_info:
            parse_www_authenticate('Bearer service="S",scope="SC"')
        assert exc_info.value.field == "realm"

    def test_bare_scheme_raises_missing_realm(self):
        """Test that a scheme with zero attributes is missing its realm."""
        with pytest.raises(MissingRequiredField):
            parse_www_authenticate("Bearer")


class TestParseBasic:
    """Test parsing of Basic challenges."""

    def test_basic_realm_with_spaces(self):
        """Test that the realm keeps embedded spaces."""
        challenge = parse_www_authenticate('Basic realm="Registry realm"')
        assert challenge == BasicChallenge(realm="Registry realm")

    def test_basic_ignores_bearer_only_keys(self):
        """Test that service/scope are dropped for Basic."""
        challenge = parse_www_authenticate('Basic realm="Registry",service="S"')
        assert challenge == BasicChallenge(realm="Registry")

    def test_basic_missing_realm_raises(self):
        """Test that Basic also requires a realm."""
        with pytest.raises(MissingRequiredField):
            parse_www_authenticate('Basic charset="UTF-8"')


class TestParseErrors:
    """Test headers that cannot be parsed."""

    def test_no_scheme_raises(self):
        """Test that attributes without a leading scheme are rejected."""
        with pytest.raises(ParseError, match="no method found"):
            parse_www_authenticate('realm="R",service="S"')

    def test_empty_header_raises(self):
        """Test that an empty value is rejected."""
        with pytest.raises(ParseError):
            parse_www_authenticate(b"")

    def test_scheme_is_case_sensitive(self):
        """Test that lowercase schemes are not recognised."""
        with pytest.raises(ParseError, match="no method found"):
            parse_www_authenticate('bearer realm="R"')

    def test_unsupported_scheme_raises(self):
        """Test that schemes other than Bearer/Basic are rejected."""
        with pytest.raises(ParseError, match="unsupported authentication scheme"):
            parse_www_authenticate('Digest realm="R",nonce="abc"')

    def test_invalid_utf8_raises(self):
        """Test that non UTF-8 bytes are rejected before scanning."""
        with pytest.raises(ParseError, match="not valid UTF-8"):
            parse_www_authenticate(b'Bearer realm="\xff\xfe"')

    def test_missing_field_is_a_parse_error(self):
        """Test that MissingRequiredField belongs to the ParseError family."""
        assert issubclass(MissingRequiredField, ParseError)


class TestChallengeImmutability:
    """Test that parsed challenges are immutable values."""

    def test_bearer_is_frozen(self):
        challenge = parse_www_authenticate('Bearer realm="R"')
        with pytest.raises(dataclasses.FrozenInstanceError):
            challenge.realm = "other"  # type: ignore[misc]

    def test_basic_is_frozen(self):
        challenge = parse_www_authenticate('Basic realm="R"')
        with pytest.raises(dataclasses.FrozenInstanceError):
            challenge.realm = "other"  # type: ignore[misc]


class TestTokenUrl:
    """Test token endpoint URL composition."""

    def test_realm_only_no_scopes(self):
        assert BearerChallenge(realm="https://a/token").token_url([]) == "https://a/token"

    def test_service_without_scopes(self):
        challenge = BearerChallenge(realm="https://a/token", service="reg")
        assert challenge.token_url([]) == "https://a/token?service=reg"

    def test_single_scope_without_service(self):
        challenge = BearerChallenge(realm="https://a/token")
        assert challenge.token_url(["repository:app:pull"]) == "https://a/token?scope=repository:app:pull"

    def test_single_scope_with_service(self):
        challenge = BearerChallenge(realm="https://a/token", service="reg")
        assert challenge.token_url(["repository:app:pull"]) == (
            "https://a/token?service=reg&scope=repository:app:pull"
        )

    def test_multiple_scopes_joined_uniformly(self):
        """Test that every scope after the first is its own &scope= parameter."""
        challenge = BearerChallenge(realm="https://a/token", service="reg")
        assert challenge.token_url(["s1", "s2", "s3"]) == (
            "https://a/token?service=reg&scope=s1&scope=s2&scope=s3"
        )

    def test_multiple_scopes_without_service(self):
        challenge = BearerChallenge(realm="https://a/token")
        assert challenge.token_url(["s1", "s2"]) == "https://a/token?scope=s1&scope=s2"

    def test_challenge_scope_is_not_requested_implicitly(self):
        """Test that only explicitly requested scopes reach the URL."""
        challenge = BearerChallenge(realm="https://a/token", service="reg", scope="repository:app:pull")
        assert challenge.token_url([]) == "https://a/token?service=reg"
