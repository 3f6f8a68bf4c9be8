"""
Language identification backed by langdetect.
"""

import logging
from typing import Optional

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

from .base import get_registry

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"


class LangdetectIdentifier:
    """
    Dominant-language identification using langdetect's top guess.

    langdetect is probabilistic; a fixed seed makes repeated calls on the
    same sample agree.
    """

    def __init__(self, seed: int = 0):
        DetectorFactory.seed = seed

    def identify(self, sample: str) -> Optional[str]:
        if not sample or not sample.strip():
            return None
        try:
            language = detect(sample)
        except LangDetectException as e:
            # No usable features (digits, punctuation only)
            logger.debug("Language undetermined: %s", e)
            return None
        return None if language == UNKNOWN_LANGUAGE else language


get_registry().register_language("langdetect", LangdetectIdentifier)
