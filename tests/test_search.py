"""
Tests for the prefix builder, nonce encoder and hash search worker.
"""

import hashlib

import pytest

from minsha.channel import REPORT, Mailbox
from minsha.search import (
    MAXIMUM,
    Exhausted,
    Improved,
    NonceCandidate,
    build_prefix,
    decode,
    encode,
    encode_into,
    nonce,
    nonce_capacity,
    partition,
    search,
)


def drain(mailbox):
    """Collect every report up to and including the terminal Exhausted."""
    reports = []
    while True:
        stream, item = mailbox.receive()
        assert stream == REPORT
        reports.append(item)
        if isinstance(item, Exhausted):
            return reports


class TestPrefix:
    """Test prefix construction."""

    def test_username_only(self):
        assert build_prefix("alice") == b"alice"

    def test_with_message(self):
        assert build_prefix("alice", "hello") == b"alice/hello"

    def test_capacity(self):
        assert nonce_capacity() == 64
        assert nonce_capacity("hello") == 59
        assert nonce_capacity("x" * 64) == 0


class TestPartition:
    """Test worker partitioning."""

    @pytest.mark.parametrize("count", [1, 2, 3, 8])
    def test_offsets(self, count):
        for worker in range(count):
            for iteration in range(50):
                assert nonce(worker, iteration, count) % count == worker

    def test_disjoint_and_complete(self):
        count, iterations = 4, 25
        shares = [set(partition(worker, count, iterations)) for worker in range(count)]

        for a in range(count):
            for b in range(a + 1, count):
                assert not shares[a] & shares[b]

        assert set().union(*shares) == set(range(count * iterations))

    def test_cap(self):
        assert list(partition(1, 3, 4)) == [1, 4, 7, 10]
        assert list(partition(0, 1, 0)) == []


class TestEncoding:
    """Test the least-significant-first base64 encoding."""

    def test_single_digits(self):
        assert encode(0) == "A"
        assert encode(1) == "B"
        assert encode(63) == "/"

    def test_digit_order(self):
        # 64 = 0 + 1 * 64
        assert encode(64) == "AB"
        assert encode(65) == "BB"
        assert encode(64 ** 2) == "AAB"

    @pytest.mark.parametrize("value", [0, 1, 63, 64, 4095, 4096, 123456789, 2 ** 64 - 1])
    def test_decode(self, value):
        assert decode(encode(value)) == value

    def test_overflow(self):
        assert encode(63, capacity = 1) == "/"
        assert encode(64, capacity = 1) is None
        assert encode(0, capacity = 0) is None

    def test_encode_into_appends(self):
        buffer = bytearray(b"x")
        assert encode_into(2, buffer)
        assert buffer == b"xC"


class TestSearch:
    """Test the hash search worker."""

    def test_concrete_scenario(self):
        prefix = build_prefix("alice")
        digests = {
            text: hashlib.sha256(f"alice/{text}".encode()).digest()
            for text in ["A", "B", "C"]
        }
        best = min(digests, key = digests.get)

        assert search(0, 1, prefix, 3) == NonceCandidate(digests[best], best)

    def test_reports_only_improvements(self):
        mailbox = Mailbox()
        result = search(0, 1, build_prefix("alice"), 3, mailbox.sender(REPORT))
        reports = drain(mailbox)

        expected, minimum = [], MAXIMUM.digest
        for text in ["A", "B", "C"]:
            digest = hashlib.sha256(f"alice/{text}".encode()).digest()
            if digest < minimum:
                minimum = digest
                expected.append(Improved(0, NonceCandidate(digest, text)))

        assert reports == expected + [Exhausted(0)]
        assert reports[-2].candidate == result

    def test_improvements_strictly_decrease(self):
        mailbox = Mailbox()
        search(2, 3, build_prefix("bob", "hi"), 500, mailbox.sender(REPORT))
        reports = drain(mailbox)

        digests = [report.candidate.digest for report in reports[:-1]]
        assert digests
        assert all(a > b for a, b in zip(digests, digests[1:]))
        assert all(report.worker == 2 for report in reports)
        assert all(decode(report.candidate.nonce) % 3 == 2 for report in reports[:-1])

    def test_deterministic(self):
        prefix = build_prefix("carol", "again")
        assert search(0, 1, prefix, 200) == search(0, 1, prefix, 200)

    def test_nonce_matches_digest(self):
        result = search(0, 1, build_prefix("dave", "msg"), 100)
        assert hashlib.sha256(f"dave/msg/{result.nonce}".encode()).digest() == result.digest

    def test_overflow_on_first_iteration(self):
        mailbox = Mailbox()
        result = search(0, 1, build_prefix("alice", "x" * 64), 10, mailbox.sender(REPORT), capacity = 0)

        assert result == MAXIMUM
        assert drain(mailbox) == [Exhausted(0)]

    def test_overflow_midway(self):
        # One symbol only covers 0..63
        mailbox = Mailbox()
        result = search(0, 1, b"eve", None, mailbox.sender(REPORT), capacity = 1)

        assert len(result.nonce) == 1
        assert isinstance(drain(mailbox)[-1], Exhausted)

    def test_zero_iterations(self):
        mailbox = Mailbox()
        assert search(0, 1, b"alice", 0, mailbox.sender(REPORT)) == MAXIMUM
        assert drain(mailbox) == [Exhausted(0)]

    def test_closed_mailbox_is_ignored(self):
        mailbox = Mailbox()
        mailbox.close()

        assert search(0, 1, b"alice", 50, mailbox.sender(REPORT)) == search(0, 1, b"alice", 50)
        assert mailbox.empty()
