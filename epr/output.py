"""Write survey samples and analysis results to reproducible CSV files.

This module is the export boundary between in-memory analysis and the files
handed over with a test report.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Tuple

from .analysis import EPRResult, create_results_dataframe
from .data_processing import Sample, samples_to_dataframe

logger = logging.getLogger(__name__)


def save_survey_to_csv(
    samples: Iterable[Sample], result: EPRResult, output_dir: str = "output"
) -> Tuple[str, str]:
    """Save the sample table and the result summary to CSV files.

    Args:
        samples (Iterable[Sample]): All samples in entry order, including
            excluded ones, with distances already corrected from the
            reference point.
        result (EPRResult): Output of ``analyze_survey`` for those samples.
        output_dir (str): Directory where CSV outputs are written.

    Returns:
        tuple[str, str]: Paths to ``survey_samples.csv`` and
        ``epr_result.csv``.
    """
    os.makedirs(output_dir, exist_ok=True)

    samples_path = os.path.join(output_dir, "survey_samples.csv")
    result_path = os.path.join(output_dir, "epr_result.csv")

    samples_to_dataframe(samples).to_csv(samples_path, index=False)
    create_results_dataframe([result]).to_csv(result_path, index=False)

    logger.info("Saved survey samples to %s", samples_path)
    logger.info("Saved EPR result to %s", result_path)

    return samples_path, result_path
