"""요청 분류기 기본 인터페이스.

Request classifier base interface.
Every classifier provider implements ``RequestClassifier``; the request
service treats the result as an opaque category/priority hint.
"""

from abc import ABC, abstractmethod

from ertis.models.request import RequestPriority


class ClassificationResult:
    """분류 결과 — Standardized classifier output.

    Attributes:
        category: 추정 카테고리 키, 없으면 None (Catalog category key or None)
        priority: 추정 우선순위, 없으면 None (Suggested priority or None)
        analysis: 사람이 읽을 수 있는 분석 요약 (Human-readable analysis text)
        provider: 결과를 만든 제공자 이름 (Provider name)
    """

    def __init__(
        self,
        category: str | None,
        priority: RequestPriority | None,
        analysis: str,
        provider: str,
    ) -> None:
        self.category = category
        self.priority = priority
        self.analysis = analysis
        self.provider = provider


class RequestClassifier(ABC):
    """분류기 제공자 추상 클래스 — Abstract classifier provider."""

    name: str = "base"

    @abstractmethod
    async def classify(
        self,
        description: str,
        problem_type: str,
        photo_url: str | None = None,
    ) -> ClassificationResult:
        """신고 내용을 분류합니다.

        Classify a citizen report. Implementations may raise; the caller
        logs the failure and keeps the creation-time defaults.

        Args:
            description: 시민이 작성한 설명 (Citizen description)
            problem_type: 선택된 문제 유형 (Selected problem type)
            photo_url: 첨부 사진 URL (Attached photo, optional)

        Returns:
            ClassificationResult: 분류 결과 (Classification result)
        """
