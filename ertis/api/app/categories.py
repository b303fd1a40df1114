"""분류 카탈로그 라우터 — 요청 작성 화면용 카테고리와 문제 유형.

Category Router — Categories and problem types for the request form.
"""

from fastapi import APIRouter

from ertis.schemas.common import CategoryResponse
from ertis.services.classification.catalog import list_categories

router: APIRouter = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def get_categories() -> list[dict]:
    """카테고리 목록 — Public category catalog."""
    return list_categories()
