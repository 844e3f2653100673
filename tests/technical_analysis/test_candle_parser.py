"""Tests for converting raw kline rows into candles."""

import pytest

from shared_code.common_price import Candle
from technical_analysis.candle_parser import KlineParseError, parse_kline, parse_klines


DAY_MS = 86_400_000
START_MS = 1_700_006_400_000


class TestParseKlines:
    """Test parsing of well-formed rows."""

    def test_parse_preserves_count_and_order(self, raw_klines):
        """Every row becomes one candle, in response order."""
        candles = parse_klines(raw_klines)

        assert len(candles) == 3
        assert [c.open_time for c in candles] == [
            START_MS,
            START_MS + DAY_MS,
            START_MS + 2 * DAY_MS,
        ]
        assert [c.close for c in candles] == [110.0, 90.0, 100.0]

    def test_parse_field_values(self, raw_klines):
        """Prices are floats, times and volume are integers."""
        candle = parse_klines(raw_klines)[0]

        assert candle == Candle(
            open_time=START_MS,
            open=100.0,
            high=112.0,
            low=99.0,
            close=110.0,
            volume=1000,
            close_time=START_MS + DAY_MS - 1,
        )
        assert isinstance(candle.open_time, int)
        assert isinstance(candle.close_time, int)
        assert isinstance(candle.volume, int)
        assert candle.open_time <= candle.close_time

    def test_parse_small_prices(self, kline_row):
        """SHIB-sized prices keep their precision."""
        row = kline_row(0, "0.00000812", "0.00000850", "0.00000800", "0.00000833")

        candle = parse_kline(row)

        assert candle.open == pytest.approx(0.00000812)
        assert candle.close == pytest.approx(0.00000833)

    def test_parse_exactly_seven_fields(self, kline_row):
        """Trailing fields are optional."""
        row = kline_row(0, "1", "2", "0.5", "1.5")[:7]

        candle = parse_kline(row)

        assert candle.high == 2.0

    def test_parse_datetime_properties(self, raw_klines):
        """Open and close times convert to UTC datetimes."""
        candle = parse_klines(raw_klines)[0]

        assert candle.open_datetime.strftime("%Y-%m-%d") == "2023-11-15"
        assert candle.close_datetime > candle.open_datetime

    def test_parse_empty(self):
        """No rows give no candles."""
        assert parse_klines([]) == []


class TestLenientParsing:
    """Unparseable fields fall back to zero by default."""

    def test_fractional_volume_is_zero(self, kline_row):
        """Binance's fractional volume strings are not integers and become zero."""
        row = kline_row(0, "100", "110", "90", "105", volume="1234.56000000")

        candle = parse_kline(row)

        assert candle.volume == 0
        assert candle.close == 105.0

    def test_invalid_price_is_zero(self, kline_row):
        """A bad price does not abort the row."""
        row = kline_row(0, "abc", "110", "90", "105")

        candle = parse_kline(row)

        assert candle.open == 0.0
        assert candle.high == 110.0

    @pytest.mark.parametrize("bad_value", (None, "1700006400000", [1], True))
    def test_invalid_timestamp_is_zero(self, kline_row, bad_value):
        """Timestamps must be JSON numbers."""
        row = kline_row(0, "100", "110", "90", "105")
        row[0] = bad_value

        candle = parse_kline(row)

        assert candle.open_time == 0
        assert candle.close_time == START_MS + DAY_MS - 1

    def test_float_timestamp_is_truncated(self, kline_row):
        """A float timestamp is accepted and truncated to an integer."""
        row = kline_row(0, "100", "110", "90", "105")
        row[6] = 1700092799999.0

        assert parse_kline(row).close_time == 1700092799999

    def test_null_fields_are_zero(self, kline_row):
        """Null prices and volume are zero."""
        row = kline_row(0, None, None, None, None, volume=None)

        candle = parse_kline(row)

        assert (candle.open, candle.high, candle.low, candle.close, candle.volume) == (
            0.0,
            0.0,
            0.0,
            0.0,
            0,
        )


    def test_volume_outside_int64_is_zero(self, kline_row):
        """A volume that does not fit in 64 bits is unparseable."""
        row = kline_row(0, "100", "110", "90", "105", volume="99999999999999999999")

        assert parse_kline(row).volume == 0

    def test_volume_at_int64_limit(self, kline_row):
        """The largest 64-bit volume is still accepted."""
        row = kline_row(0, "100", "110", "90", "105", volume=str(2**63 - 1))

        assert parse_kline(row).volume == 2**63 - 1

    def test_timestamp_outside_int64_is_zero(self, kline_row):
        """Timestamps share the 64-bit range."""
        row = kline_row(0, "100", "110", "90", "105")
        row[6] = 2**64

        assert parse_kline(row).close_time == 0

    @pytest.mark.parametrize("text", ("1_0", " 2 ", "2 ", "\t3", "1_000"))
    def test_padded_or_separated_numbers_are_zero(self, kline_row, text):
        """Underscores and surrounding whitespace make a numeric string invalid."""
        row = kline_row(0, text, "110", "90", text, volume=text)

        candle = parse_kline(row)

        assert (candle.open, candle.close, candle.volume) == (0.0, 0.0, 0)
        assert candle.high == 110.0


class TestStrictParsing:
    """With lenient parsing disabled, bad fields are errors."""

    def test_strict_rejects_bad_price(self, kline_row):
        """The offending field and row index are reported."""
        rows = [
            kline_row(0, "100", "110", "90", "105", volume="10"),
            kline_row(1, "100", "oops", "90", "105", volume="10"),
        ]

        with pytest.raises(KlineParseError, match="high in kline at index 1"):
            parse_klines(rows, lenient=False)

    def test_strict_rejects_fractional_volume(self, kline_row):
        """Fractional volume is not an integer."""
        row = kline_row(0, "100", "110", "90", "105", volume="1.5")

        with pytest.raises(KlineParseError, match="volume"):
            parse_kline(row, lenient=False)

    def test_strict_rejects_oversized_volume(self, kline_row):
        """A volume beyond the 64-bit range is an error."""
        row = kline_row(0, "100", "110", "90", "105", volume="99999999999999999999")

        with pytest.raises(KlineParseError, match="volume"):
            parse_kline(row, lenient=False)

    def test_strict_rejects_underscored_price(self, kline_row):
        """Digit separators are not accepted in prices."""
        row = kline_row(0, "1_0", "110", "90", "105", volume="10")

        with pytest.raises(KlineParseError, match="open"):
            parse_kline(row, lenient=False)

    def test_strict_accepts_valid_rows(self, raw_klines):
        """Valid rows parse the same way in both modes."""
        assert parse_klines(raw_klines, lenient=False) == parse_klines(raw_klines)


class TestShortRows:
    """Rows with fewer than seven fields are always fatal."""

    @pytest.mark.parametrize("lenient", (True, False))
    def test_short_row_raises(self, kline_row, lenient):
        """A six-field row cannot be parsed in either mode."""
        row = kline_row(0, "100", "110", "90", "105")[:6]

        with pytest.raises(KlineParseError, match="6 fields"):
            parse_klines([row], lenient=lenient)
