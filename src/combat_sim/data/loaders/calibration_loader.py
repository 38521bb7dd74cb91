"""Calibration case loader."""

import json
import logging
from functools import lru_cache

from ...combat.calibration import SingleShotTestCase
from ...config import settings

logger = logging.getLogger(__name__)

CASES_FILE_NAME = "single_shot_cases.json"


@lru_cache(maxsize=1)
def load_calibration_cases() -> tuple[SingleShotTestCase, ...]:
    """Load the recorded single-shot cases.

    Returns:
        Tuple of test cases.
    """
    path = settings.CALIBRATION_DATA_DIR / CASES_FILE_NAME
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    cases = tuple(
        SingleShotTestCase.model_validate(case) for case in data["singleShotTestCases"]
    )
    logger.debug("Loaded %d calibration cases from %s", len(cases), path)
    return cases


def clear_cache() -> None:
    load_calibration_cases.cache_clear()
