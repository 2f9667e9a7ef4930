"""Tests for request signing"""

import base64
import hashlib
import hmac

from acm_watch.common.config import GroupIdentity
from acm_watch.services.watch import signer
from acm_watch.services.watch.signer import compute_signature, sign_headers


class TestSignature:

    def test_matches_hmac_sha1(self):
        expected = base64.b64encode(
            hmac.new(b"sk", b"ns+grp+1700000000000", hashlib.sha1).digest()
        ).decode()
        assert compute_signature("sk", "ns", "grp", "1700000000000") == expected

    def test_deterministic(self):
        first = compute_signature("sk", "ns", "grp", "123")
        second = compute_signature("sk", "ns", "grp", "123")
        assert first == second

    def test_changes_with_every_input(self):
        base = compute_signature("sk", "ns", "grp", "123")
        assert compute_signature("sk2", "ns", "grp", "123") != base
        assert compute_signature("sk", "ns2", "grp", "123") != base
        assert compute_signature("sk", "ns", "grp2", "123") != base
        assert compute_signature("sk", "ns", "grp", "124") != base


class TestHeaders:

    def test_header_set(self, identity):
        headers = sign_headers(identity, timestamp_ms=1700000000000)

        assert headers["timeStamp"] == "1700000000000"
        assert headers["Spas-AccessKey"] == "test-ak"
        assert headers["longPullingTimeout"] == "30000"
        assert headers["Spas-Signature"] == compute_signature(
            "test-sk", "ns1", "group1", "1700000000000"
        )

    def test_uses_current_time(self, identity, monkeypatch):
        monkeypatch.setattr(signer.time, "time", lambda: 1700000000.123)
        headers = sign_headers(identity)
        assert headers["timeStamp"] == "1700000000123"

    def test_clock_before_epoch_is_not_negative(self, monkeypatch):
        monkeypatch.setattr(signer.time, "time", lambda: -1.5)
        assert signer.current_timestamp_ms() == 1500

    def test_secret_not_in_repr(self):
        identity = GroupIdentity("ak", "very-secret", "ns", "grp")
        assert "very-secret" not in repr(identity)
