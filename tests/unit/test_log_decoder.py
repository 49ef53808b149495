"""Unit tests for Transfer log decoding."""

from decimal import Decimal

import pytest

from verifier.services.blockchain.log_decoder import (
    decode_transfer_log,
    decode_transfer_logs,
)
from verifier.utils.exceptions import DecodeError


class TestDecodeTransferLog:
    """Tests for decode_transfer_log."""

    def test_decodes_fields(self, make_log, make_tx_hash, sender_address, deposit_address):
        """All fields should be taken from topics, data and metadata."""
        tx_hash = make_tx_hash(1)
        log = make_log(tx_hash, 1000, 15 * 10**17, log_index=3)

        event = decode_transfer_log(log, 18)

        assert event.tx_hash == tx_hash
        assert event.block_number == 1000
        assert event.from_address == sender_address
        assert event.to_address == deposit_address
        assert event.raw_amount == 15 * 10**17
        assert event.amount == Decimal("1.5")
        assert event.log_index == 3

    def test_large_amount_is_exact(self, make_log, make_tx_hash):
        """10^12 whole tokens plus one wei must not lose precision."""
        raw = 10**12 * 10**18 + 1
        event = decode_transfer_log(make_log(make_tx_hash(2), 1, raw), 18)

        assert event.amount == Decimal("1000000000000.000000000000000001")

    def test_zero_amount(self, make_log, make_tx_hash):
        """Zero-value transfers decode to zero."""
        event = decode_transfer_log(make_log(make_tx_hash(3), 1, 0), 18)

        assert event.amount == 0

    def test_mixed_case_hex_is_normalized(self, make_log, make_tx_hash):
        """Hash and addresses should come out lower-case."""
        log = make_log(make_tx_hash(0xABC), 1, 1)
        log["transactionHash"] = log["transactionHash"].upper().replace("0X", "0x")
        log["topics"] = [t.upper().replace("0X", "0x") for t in log["topics"]]

        event = decode_transfer_log(log, 18)

        assert event.tx_hash == make_tx_hash(0xABC)
        assert event.from_address == event.from_address.lower()

    def test_missing_log_index_allowed(self, make_log, make_tx_hash):
        """logIndex is optional."""
        log = make_log(make_tx_hash(4), 1, 1)
        del log["logIndex"]

        assert decode_transfer_log(log, 18).log_index is None

    @pytest.mark.parametrize(
        "data",
        [
            "0x",
            "0x" + "00" * 31,
            "0x" + "00" * 33,
            "0x" + "zz" * 32,
            None,
        ],
    )
    def test_bad_data_rejected(self, make_log, make_tx_hash, data):
        """data must be exactly 32 bytes of hex."""
        log = make_log(make_tx_hash(5), 1, 1)
        log["data"] = data

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_too_few_topics_rejected(self, make_log, make_tx_hash):
        """A Transfer log must carry from and to topics."""
        log = make_log(make_tx_hash(6), 1, 1)
        log["topics"] = log["topics"][:2]

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_wrong_event_signature_rejected(self, make_log, make_tx_hash):
        """topics[0] must be the Transfer signature."""
        log = make_log(make_tx_hash(7), 1, 1)
        log["topics"][0] = "0x" + "ab" * 32

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_bad_block_number_rejected(self, make_log, make_tx_hash):
        """blockNumber must be a hex quantity."""
        log = make_log(make_tx_hash(8), 1, 1)
        log["blockNumber"] = 17

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_short_tx_hash_rejected(self, make_log):
        """transactionHash must be 32 bytes."""
        log = make_log("0x1234", 1, 1)

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_unpadded_address_topic_rejected(self, make_log, make_tx_hash):
        """Address topics must have 12 zero bytes of padding."""
        log = make_log(make_tx_hash(9), 1, 1)
        log["topics"][1] = "0x" + "ff" * 32

        with pytest.raises(DecodeError):
            decode_transfer_log(log, 18)

    def test_non_dict_rejected(self):
        """A log entry must be an object."""
        with pytest.raises(DecodeError):
            decode_transfer_log(["not", "a", "log"], 18)


class TestDecodeTransferLogs:
    """Tests for batch decoding."""

    def test_malformed_entries_are_counted_and_skipped(self, make_log, make_tx_hash):
        """One bad log must not abort the batch."""
        good_1 = make_log(make_tx_hash(1), 10, 10**18)
        bad = make_log(make_tx_hash(2), 11, 10**18)
        bad["data"] = "0x"
        good_2 = make_log(make_tx_hash(3), 12, 2 * 10**18)

        events, failed = decode_transfer_logs([good_1, bad, good_2], 18)

        assert failed == 1
        assert [e.tx_hash for e in events] == [make_tx_hash(1), make_tx_hash(3)]

    def test_empty_batch(self):
        """No logs, no events, no failures."""
        assert decode_transfer_logs([], 18) == ([], 0)
