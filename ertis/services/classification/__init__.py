"""요청 자동 분류 패키지.

Request classification package. Classification is optional and best-effort:
it never blocks request creation.
"""

from ertis.services.classification.base import ClassificationResult, RequestClassifier
from ertis.services.classification.keyword_provider import KeywordClassifier
from ertis.services.classification.registry import get_classifier

__all__ = [
    "ClassificationResult",
    "RequestClassifier",
    "KeywordClassifier",
    "get_classifier",
]
