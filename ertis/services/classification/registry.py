"""분류기 레지스트리 — 설정에 따라 분류기 제공자를 선택.

Classifier registry — Selects the configured classifier provider.
"""

import logging

from ertis.config import settings
from ertis.services.classification.base import RequestClassifier
from ertis.services.classification.keyword_provider import KeywordClassifier

logger = logging.getLogger(__name__)

PROVIDERS: dict[str, type[RequestClassifier]] = {
    KeywordClassifier.name: KeywordClassifier,
}

_classifier: RequestClassifier | None = None


def get_classifier() -> RequestClassifier | None:
    """설정된 분류기를 반환합니다. 비활성화 시 None.

    Return the configured classifier, or None when classification is
    disabled. Unknown provider names fall back to the keyword provider.
    """
    global _classifier
    if not settings.CLASSIFIER_ENABLED:
        return None
    if _classifier is None:
        provider_cls = PROVIDERS.get(settings.CLASSIFIER_PROVIDER)
        if provider_cls is None:
            logger.warning(
                "Unknown classifier provider %r, using keyword classifier",
                settings.CLASSIFIER_PROVIDER,
            )
            provider_cls = KeywordClassifier
        _classifier = provider_cls()
        logger.info("Classifier provider registered: %s", _classifier.name)
    return _classifier
