"""Tests for sentence classification and dispatch."""

import logging

import pytest

from sailstream.errors import (
    ChecksumMismatchError,
    PipelineErrorKind,
    SentenceParseError,
)
from sailstream.nmea import MinimumNavigation, PositionFix, parse_sentence
from sailstream.nmea.parser import SENTENCE_DECODERS, split_fields

GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
RMC = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"


class TestParseSentence:
    """Tests for parse_sentence dispatch and error mapping."""

    def test_dispatch_by_sentence_type(self):
        assert isinstance(parse_sentence(GGA), PositionFix)
        assert isinstance(parse_sentence(RMC), MinimumNavigation)

    def test_supported_types(self):
        assert set(SENTENCE_DECODERS) == {"GGA", "RMC", "VTG", "MWV", "DPT", "HDG", "MTW"}

    def test_unknown_type_skipped(self, caplog):
        sentence = "$GPGSV,3,1,11,03,03,111,00,04,15,270,00,06,01,010,00,13,06,292,00*74"
        with caplog.at_level(logging.DEBUG, logger="sailstream.nmea.parser"):
            assert parse_sentence(sentence) is None
        assert "GPGSV" in caplog.text

    def test_proprietary_sentence_skipped(self):
        assert parse_sentence("$PGRME,15.0,M,45.0,M,25.0,M*1C") is None

    def test_missing_start_delimiter(self):
        with pytest.raises(SentenceParseError) as exc_info:
            parse_sentence(GGA[1:])
        assert exc_info.value.kind is PipelineErrorKind.PARSE_FAILURE

    def test_checksum_checked_before_fields(self):
        corrupted = GGA.replace("4807.038", "4807.039")
        with pytest.raises(ChecksumMismatchError) as exc_info:
            parse_sentence(corrupted)
        assert exc_info.value.kind is PipelineErrorKind.CHECKSUM_MISMATCH
        assert exc_info.value.sentence == corrupted

    def test_malformed_field_keeps_sentence(self):
        sentence = "$SDDPT,-2.8,0.5,*59"
        with pytest.raises(SentenceParseError) as exc_info:
            parse_sentence(sentence)
        assert exc_info.value.sentence == sentence
        assert exc_info.value.reason.startswith("SDDPT:")

    def test_truncated_supported_sentence(self):
        with pytest.raises(SentenceParseError, match="GGA needs"):
            parse_sentence("$GNGGA,123519.00,4807.038,N*17")

    def test_split_fields(self):
        assert split_fields("$GPVTG,054.7,T,034.4,M,005.5,N,010.2,K,A*3B") == [
            "GPVTG", "054.7", "T", "034.4", "M", "005.5", "N", "010.2", "K", "A",
        ]
