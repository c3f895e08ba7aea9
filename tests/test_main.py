import os

import pandas as pd

from conftest import FIELD_SURVEY
from main import main


def write_survey(path, rows, excluded=False):
    pd.DataFrame(
        {
            "Distance (m)": [d for d, _ in rows],
            "Voltage (mV)": [mv for _, mv in rows],
            "Excluded": [excluded] * len(rows),
        }
    ).to_csv(path, index=False)


def test_main_writes_outputs(tmp_path):
    csv_path = tmp_path / "survey.csv"
    write_survey(csv_path, FIELD_SURVEY)
    out_dir = tmp_path / "out"

    code = main(
        [
            str(csv_path),
            "--i-test", "1.0",
            "--i-fault", "1000",
            "--output-dir", str(out_dir),
            "--log-file", str(tmp_path / "run.log"),
        ]
    )

    assert code == 0
    assert os.path.exists(out_dir / "survey_samples.csv")
    assert os.path.exists(out_dir / "epr_result.csv")
    assert os.path.exists(out_dir / "epr_survey.png")


def test_main_rejects_invalid_test_current(tmp_path):
    csv_path = tmp_path / "survey.csv"
    write_survey(csv_path, FIELD_SURVEY)
    out_dir = tmp_path / "out"

    code = main(
        [
            str(csv_path),
            "--i-test", "0",
            "--output-dir", str(out_dir),
            "--log-file", str(tmp_path / "run.log"),
        ]
    )

    assert code == 1
    assert not os.path.exists(out_dir)


def test_main_fails_without_included_samples(tmp_path):
    csv_path = tmp_path / "survey.csv"
    write_survey(csv_path, FIELD_SURVEY, excluded=True)

    code = main(
        [
            str(csv_path),
            "--i-test", "1.0",
            "--no-plot",
            "--output-dir", str(tmp_path / "out"),
            "--log-file", str(tmp_path / "run.log"),
        ]
    )

    assert code == 1
