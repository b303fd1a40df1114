"""키워드 기반 분류기 — 외부 호출 없이 규칙으로 분류.

Keyword classifier — Rule-based classification with no external calls.
Matches English and Russian keywords because citizens write in either.
"""

import logging

from ertis.models.request import RequestPriority
from ertis.services.classification.base import ClassificationResult, RequestClassifier
from ertis.services.classification.catalog import base_priority, category_for_problem

logger = logging.getLogger(__name__)

# 카테고리별 키워드 — Keywords per catalog category, checked in order
CATEGORY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("electricity", ("electric", "power", "light", "lamp", "wire", "outage", "свет", "электр", "провод", "фонар")),
    ("water", ("water", "leak", "pipe", "flood", "вод", "теч", "труб", "прорыв")),
    ("roads", ("road", "pothole", "asphalt", "pavement", "crack", "дорог", "яма", "асфальт", "трещин")),
    ("garbage", ("garbage", "trash", "waste", "container", "bin", "мусор", "контейнер", "отход")),
    ("cleaning", ("snow", "dirt", "clean", "снег", "гололед", "гололёд", "уборк", "гряз")),
    ("landscaping", ("bench", "playground", "tree", "park", "скамей", "площадк", "дерев", "парк")),
]

URGENT_KEYWORDS: tuple[str, ...] = (
    "urgent", "danger", "emergency", "sparking", "injur", "children",
    "срочно", "опасн", "авари", "искрит", "дети",
)


class KeywordClassifier(RequestClassifier):
    """규칙 기반 분류기.

    Deterministic keyword classifier. The explicit problem type wins over
    description keywords for the category; urgency words raise the
    priority to high.
    """

    name = "keyword"

    async def classify(
        self,
        description: str,
        problem_type: str,
        photo_url: str | None = None,
    ) -> ClassificationResult:
        text = description.lower()

        category = category_for_problem(problem_type)
        matched: list[str] = []
        if category is None:
            for key, words in CATEGORY_KEYWORDS:
                hits = [word for word in words if word in text]
                if hits:
                    category = key
                    matched = hits
                    break

        priority = base_priority(problem_type)
        urgent = [word for word in URGENT_KEYWORDS if word in text]
        if urgent:
            priority = RequestPriority.HIGH

        parts = [f"category={category or 'unknown'}", f"priority={priority.value}"]
        if matched:
            parts.append("keywords=" + ",".join(matched))
        if urgent:
            parts.append("urgent=" + ",".join(urgent))
        if photo_url:
            parts.append("photo attached")

        logger.debug("Keyword classification for %r: %s", problem_type, parts)
        return ClassificationResult(
            category=category,
            priority=priority,
            analysis="; ".join(parts),
            provider=self.name,
        )
