import logging
import math

import numpy as np
import pandas as pd
import pytest

from epr.data_processing import (
    ReferencePoint,
    Sample,
    apply_reference_point,
    find_reference_point,
    load_survey_data,
    prepare_samples,
    samples_from_dataframe,
    samples_to_dataframe,
    set_excluded,
)
from epr.geodesy import haversine_m

REF = ReferencePoint(lat=-34.9285, lon=138.6007)


def test_samples_from_csv(tmp_path):
    csv_path = tmp_path / "survey.csv"
    pd.DataFrame(
        {
            "Distance (m)": [1.0, None, 20.0, 40.0],
            "Voltage (mV)": [150.0, 160.0, "bad", 210.0],
            "Excluded": [False, False, True, "yes"],
            "Latitude": [None, None, -34.9290, -34.9300],
            "Longitude": [None, None, 138.6010, 138.6020],
            "Mode": ["manual", "manual", "GPS", "gps"],
        }
    ).to_csv(csv_path, index=False)

    samples = samples_from_dataframe(load_survey_data(str(csv_path)))

    assert len(samples) == 4
    assert (samples[0].distance, samples[0].voltage_mv) == (1.0, 150.0)
    assert not samples[0].has_position
    assert math.isnan(samples[1].distance)
    assert math.isnan(samples[2].voltage_mv)
    assert [s.excluded for s in samples] == [False, False, True, True]
    assert [s.position_derived for s in samples] == [False, False, True, True]
    assert samples[3].has_position


def test_missing_voltage_column_raises():
    with pytest.raises(KeyError, match="Voltage"):
        samples_from_dataframe(pd.DataFrame({"Distance (m)": [1.0]}))


def test_reference_overwrites_only_position_derived_rows():
    gps = Sample(distance=5.0, voltage_mv=100.0, lat=-34.9290, lon=138.6020, position_derived=True)
    manual = Sample(distance=7.0, voltage_mv=110.0, lat=-34.9290, lon=138.6020)
    gps_no_fix = Sample(distance=9.0, voltage_mv=120.0, position_derived=True)

    out = apply_reference_point([gps, manual, gps_no_fix], REF)

    assert out[0].distance == pytest.approx(haversine_m(REF.lat, REF.lon, gps.lat, gps.lon))
    assert out[0].distance != 5.0
    assert out[1].distance == 7.0
    assert out[2].distance == 9.0
    assert gps.distance == 5.0


def test_invalid_reference_is_ignored():
    gps = Sample(distance=5.0, voltage_mv=100.0, lat=-34.9, lon=138.6, position_derived=True)
    out = apply_reference_point([gps], ReferencePoint(lat=float("nan"), lon=138.6))
    assert out[0].distance == 5.0
    assert apply_reference_point([gps], None)[0] is gps


def test_prepare_samples_filters_and_stable_sorts(caplog):
    caplog.set_level(logging.WARNING)
    samples = [
        Sample(distance=30.0, voltage_mv=300.0),
        Sample(distance=10.0, voltage_mv=101.0),
        Sample(distance=float("nan"), voltage_mv=999.0),
        Sample(distance=20.0, voltage_mv=200.0, excluded=True),
        Sample(distance=10.0, voltage_mv=102.0),
        Sample(distance=5.0, voltage_mv=float("nan")),
    ]
    snapshot = prepare_samples(samples)

    assert isinstance(snapshot, tuple)
    assert [s.distance for s in snapshot] == [10.0, 10.0, 30.0]
    assert [s.voltage_mv for s in snapshot] == [101.0, 102.0, 300.0]
    assert any("Dropped 2 sample(s)" in rec.message for rec in caplog.records)


def test_prepare_samples_applies_reference_before_sorting():
    far_gps = Sample(distance=0.0, voltage_mv=220.0, lat=-34.9300, lon=138.6007, position_derived=True)
    near = Sample(distance=10.0, voltage_mv=150.0)
    snapshot = prepare_samples([far_gps, near], REF)
    assert snapshot[0] is near
    assert snapshot[1].distance > 100.0


def test_find_reference_point():
    df = pd.DataFrame(
        {
            "Distance (m)": [0.0, 10.0],
            "Voltage (mV)": [0.0, 100.0],
            "Latitude": [-34.9285, -34.9290],
            "Longitude": [138.6007, 138.6010],
            "Reference": ["x", ""],
        }
    )
    assert find_reference_point(df) == REF
    assert find_reference_point(df.drop(columns=["Reference"])) is None


def test_samples_to_dataframe_keeps_excluded_rows():
    samples = [
        Sample(distance=1.0, voltage_mv=10.0),
        Sample(distance=2.0, voltage_mv=20.0, excluded=True, position_derived=True),
    ]
    df = samples_to_dataframe(samples)
    assert list(df["Excluded"]) == [False, True]
    assert list(df["Mode"]) == ["manual", "gps"]
    assert np.isnan(df.loc[0, "Latitude"])


def test_set_excluded_returns_new_snapshot(field_samples):
    flagged = set_excluded(field_samples, -1)

    assert flagged[-1].excluded
    assert not field_samples[-1].excluded
    assert flagged[:-1] == tuple(field_samples[:-1])
    assert len(prepare_samples(flagged)) == 11
    assert not set_excluded(flagged, 11, excluded=False)[-1].excluded
    with pytest.raises(IndexError):
        set_excluded(field_samples, 12)
