"""
Language gate: admits only samples written in the supported language.
"""

import logging
from typing import Optional

from .config import SUPPORTED_LANGUAGE
from .errors import LanguageUnsupported
from .providers.base import LanguageIdentifier

logger = logging.getLogger(__name__)


class LanguageGate:
    """
    Trusts the identifier's top guess; there is no confidence threshold.

    Args:
        identifier: Language identification provider
        supported_language: The single admitted language tag
    """

    def __init__(self, identifier: LanguageIdentifier, supported_language: str = SUPPORTED_LANGUAGE):
        self.identifier = identifier
        self.supported_language = supported_language

    def identify(self, sample: str) -> Optional[str]:
        if not sample:
            return None
        return self.identifier.identify(sample)

    def admit(self, sample: str, source: Optional[str] = None) -> str:
        """Return the detected tag if it is the supported language.

        Raises:
            LanguageUnsupported: For any other tag, or no tag at all
        """
        language = self.identify(sample)
        if language != self.supported_language:
            logger.info("Rejected %s: detected language %s", source or "sample", language or "unknown")
            raise LanguageUnsupported(language, source=source)
        return language
