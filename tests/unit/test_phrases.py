"""
Unit Tests for the zpool wording lookup tables
"""

import logging

import pytest

from zpool_status_exporter.zpool.core.entities.pool_status import (
    ErrorStatus,
    PoolState,
    PoolStatusDescription,
    ScanStatus,
)
from zpool_status_exporter.zpool.parsing.phrases import (
    classify_errors,
    classify_scan_message,
    classify_status,
    lookup_pool_state,
    normalize_text,
)


def test_normalize_text_collapses_wrapped_lines():
    text = "One or more devices has experienced an error resulting in data\n\tcorruption.  Applications"
    assert normalize_text(text) == (
        "One or more devices has experienced an error resulting in data corruption. Applications"
    )


class TestPoolStateTokens:

    @pytest.mark.parametrize("token,state", [
        ("ONLINE", PoolState.ONLINE),
        ("OFFLINE", PoolState.OFFLINE),
        ("SPLIT", PoolState.SPLIT),
        ("DEGRADED", PoolState.DEGRADED),
        ("FAULTED", PoolState.FAULTED),
        ("SUSPENDED", PoolState.SUSPENDED),
        ("REMOVED", PoolState.REMOVED),
        ("UNAVAIL", PoolState.UNAVAIL),
    ])
    def test_known_tokens(self, token, state):
        assert lookup_pool_state(token) is state

    def test_match_is_case_sensitive(self, caplog):
        assert lookup_pool_state("online") is PoolState.UNRECOGNIZED
        assert "Unrecognized PoolState: 'online'" in caplog.text

    def test_unknown_token_is_unrecognized(self, caplog):
        assert lookup_pool_state("INUSE") is PoolState.UNRECOGNIZED
        assert any(record.levelno == logging.WARNING for record in caplog.records)


class TestStatusPhrases:

    def test_label_missing(self):
        text = (
            "One or more devices could not be used because the label is missing or\n"
            "\tinvalid.  Sufficient replicas exist for the pool to continue\n"
            "\tfunctioning in a degraded state."
        )
        assert classify_status(text) is PoolStatusDescription.SUFFICIENT_REPLICAS_FOR_MISSING

    def test_could_not_be_opened(self):
        text = (
            "One or more devices could not be opened.  Sufficient replicas exist for\n"
            "\tthe pool to continue functioning in a degraded state."
        )
        assert classify_status(text) is PoolStatusDescription.SUFFICIENT_REPLICAS_FOR_MISSING

    def test_data_corruption(self):
        text = (
            "One or more devices has experienced an error resulting in data\n"
            "\tcorruption.  Applications may be affected."
        )
        assert classify_status(text) is PoolStatusDescription.DATA_CORRUPTION

    @pytest.mark.parametrize("text", [
        "Some supported and requested features are not enabled on the pool.\n"
        "\tThe pool can still be used, but some features are unavailable.",
        "Some supported features are not enabled on the pool. The pool can\n"
        "\tstill be used, but some features are unavailable.",
    ])
    def test_features_available_phrasings(self, text):
        assert classify_status(text) is PoolStatusDescription.FEATURES_AVAILABLE

    def test_device_removed(self):
        text = (
            "One or more devices has been removed by the administrator.\n"
            "\tSufficient replicas exist for the pool to continue functioning in a\n"
            "\tdegraded state."
        )
        assert classify_status(text) is PoolStatusDescription.DEVICE_REMOVED

    def test_unknown_paragraph(self, caplog):
        text = "One or more devices are faulted in response to persistent errors."
        assert classify_status(text) is PoolStatusDescription.UNRECOGNIZED
        assert "Unrecognized PoolStatusDescription" in caplog.text


class TestScanMessages:

    @pytest.mark.parametrize("message,status", [
        ("scrub repaired 0B in 00:00:01 with 0 errors", ScanStatus.SCRUB_REPAIRED),
        ("resilvered 1.21M in 00:00:02 with 0 errors", ScanStatus.RESILVERED),
        ("scrub in progress", ScanStatus.SCRUB_IN_PROGRESS),
        ("scrub canceled", ScanStatus.SCRUB_CANCELED),
    ])
    def test_known_prefixes(self, message, status):
        assert classify_scan_message(message) is status

    def test_unknown_message(self, caplog):
        assert classify_scan_message("resilver in progress") is ScanStatus.UNRECOGNIZED
        assert "Unrecognized ScanStatus: 'resilver in progress'" in caplog.text


class TestErrorsLine:

    def test_no_known_errors(self):
        assert classify_errors("No known data errors") is ErrorStatus.OK

    @pytest.mark.parametrize("text", [
        "2 data errors, use '-v' for a list",
        "1 data error, use '-v' for a list",
    ])
    def test_data_errors(self, text):
        assert classify_errors(text) is ErrorStatus.DATA_ERRORS

    def test_unknown_errors_text(self, caplog):
        assert classify_errors("something else entirely") is ErrorStatus.UNRECOGNIZED
        assert "Unrecognized ErrorStatus" in caplog.text
