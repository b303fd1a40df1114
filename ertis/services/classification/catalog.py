"""민원 분류 카탈로그 — 카테고리별 문제 유형과 기본 우선순위.

Request category catalog — Categories, their problem types, and the base
priority derived from the problem type at creation.
"""

from ertis.models.request import RequestPriority

# 카테고리 → (표시 이름, [(문제 유형 ID, 라벨)])
# Category key → (display name, [(problem type id, label)])
CATEGORIES: dict[str, tuple[str, list[tuple[str, str]]]] = {
    "electricity": ("Electricity", [
        ("no_light", "Street lighting is out"),
        ("broken_wire", "Broken wire"),
        ("no_power", "No electricity"),
    ]),
    "water": ("Water supply", [
        ("no_water", "No water"),
        ("leak", "Leak"),
        ("broken_pipe", "Burst pipe"),
    ]),
    "roads": ("Roads", [
        ("pothole", "Pothole"),
        ("crack", "Cracked pavement"),
    ]),
    "garbage": ("Garbage", [
        ("overflowing", "Overflowing container"),
        ("no_collection", "Garbage not collected"),
    ]),
    "cleaning": ("Cleaning", [
        ("no_cleaning", "Area not cleaned"),
        ("snow", "Snow not cleared"),
    ]),
    "landscaping": ("Landscaping", [
        ("broken_bench", "Broken bench"),
        ("playground", "Broken playground"),
    ]),
}

# 위험도가 높은 문제 유형 — Problem types that start at high priority
HIGH_PRIORITY_PROBLEMS: frozenset[str] = frozenset({
    "broken_wire",
    "no_power",
    "broken_pipe",
    "leak",
    "pothole",
})


def is_known_category(category: str) -> bool:
    return category in CATEGORIES


def category_for_problem(problem_type: str) -> str | None:
    """문제 유형이 속한 카테고리를 찾습니다 — Category owning a problem type, if any."""
    for key, (_, problems) in CATEGORIES.items():
        if any(problem_id == problem_type for problem_id, _ in problems):
            return key
    return None


def base_priority(problem_type: str) -> RequestPriority:
    """문제 유형에서 기본 우선순위를 도출합니다.

    Derive the creation-time priority from the problem type.
    Unknown or free-text problem types default to medium.
    """
    if problem_type in HIGH_PRIORITY_PROBLEMS:
        return RequestPriority.HIGH
    return RequestPriority.MEDIUM


def list_categories() -> list[dict]:
    """API 응답용 카탈로그 — Catalog shaped for the categories endpoint."""
    return [
        {
            "id": key,
            "name": name,
            "problems": [{"id": problem_id, "label": label} for problem_id, label in problems],
        }
        for key, (name, problems) in CATEGORIES.items()
    ]
