"""Tests for output formatting and the log handler."""

import logging

import pytest

from cubetimer.output import (
    BLOCKS,
    ColoredHandler,
    format_difference,
    format_optional,
    format_time,
    render_chart,
    sparkline,
)


class TestFormatTime:
    """Tests for format_time and friends."""

    @pytest.mark.parametrize(
        "millis,expected",
        [
            (0, "0.000"),
            (7, "0.007"),
            (12345, "12.345"),
            (59999, "59.999"),
            (60000, "1:00.000"),
            (83456, "1:23.456"),
        ],
    )
    def test_format_time(self, millis: int, expected: str) -> None:
        assert format_time(millis) == expected

    def test_difference_is_unsigned(self) -> None:
        assert format_difference(-1500) == "1.500s"
        assert format_difference(250) == "0.250s"

    def test_optional(self) -> None:
        assert format_optional(None) == "--:--.--"
        assert format_optional(1500.7) == "1.500"


class TestSparkline:
    """Tests for the ASCII trend chart."""

    def test_empty(self) -> None:
        assert sparkline([]) == ""
        assert render_chart([]) == []

    def test_one_char_per_value(self) -> None:
        assert len(sparkline([1.0, 2.0, 3.0])) == 3

    def test_slowest_tallest(self) -> None:
        line = sparkline([1000, 3000, 2000])
        assert line[1] == BLOCKS[-1]
        assert line[0] == BLOCKS[1]

    def test_flat(self) -> None:
        line = sparkline([5.0, 5.0])
        assert line[0] == line[1]

    def test_chart_labels(self) -> None:
        lines = render_chart([1000, 3000, 2000], width=40)
        assert len(lines) == 3
        assert "3.000" in lines[0]
        assert "1.000" in lines[2]

    def test_chart_keeps_latest(self) -> None:
        lines = render_chart([99000, 1000, 2000], width=2)
        assert "1:39.000" not in lines[0]


class TestColoredHandler:
    """Tests for routing log records to the terminal."""

    def test_error_marked(self, capsys) -> None:
        logger = logging.getLogger("cubetimer.test.handler")
        logger.propagate = False
        handler = ColoredHandler()
        logger.addHandler(handler)
        try:
            logger.error("Could not save solve")
        finally:
            logger.removeHandler(handler)
        out = capsys.readouterr().out
        assert "[!]" in out
        assert "Could not save solve" in out
