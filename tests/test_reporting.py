"""Tests for console formatting of analysis results."""

import pytest

from epr.analysis import InstrumentSettings, analyze_survey
from epr.reporting import MISSING, format_quantity, print_result, result_summary_lines


@pytest.mark.parametrize(
    "value, dp, unit, expected",
    [
        (1.23456, 2, "V", "1.23 V"),
        (2.0, 3, "", "2.000"),
        (61.0, 1, "m", "61.0 m"),
        (float("nan"), 3, "V", MISSING),
        (float("inf"), 3, "ohm", MISSING),
        (None, 3, "", MISSING),
    ],
)
def test_format_quantity(value, dp, unit, expected):
    assert format_quantity(value, dp, unit) == expected


def test_summary_lines_for_field_survey(field_samples):
    settings = InstrumentSettings(i_test=1.0, i_fault=1000.0)
    lines = result_summary_lines(analyze_survey(field_samples, settings), settings)

    assert lines[0] == "Included points: 12"
    assert lines[1].startswith("Knee: 61.0 m (Split fit (R vs d)")
    assert lines[2].startswith("V_inf [extrapolate]: 0.2194 V (Extrapolated V vs 1/d over 4")
    assert lines[4].startswith("Scale: 1000.000 (I_fault=1000.0 A, I_test=1.000 A")
    assert lines[5] == "EPR scaled: 219.4 V"
    assert lines[6].startswith("Plateau: Borderline (Last 4: range 11.6%")


def test_summary_shows_dash_without_fault_current(field_samples):
    settings = InstrumentSettings(i_test=1.0)
    lines = result_summary_lines(analyze_survey(field_samples[-4:], settings), settings)

    assert lines[1].startswith("Knee: none (Insufficient points")
    assert f"EPR scaled: {MISSING}" in lines


def test_print_result(field_samples, capsys):
    settings = InstrumentSettings(i_test=1.0)
    print_result(analyze_survey(field_samples, settings), settings)
    out = capsys.readouterr().out
    assert "Earth potential rise summary:" in out
    assert " - Plateau: Borderline" in out
