"""서비스 패키지 — 요청 수명주기 비즈니스 로직.

Service package — Request lifecycle business logic.
Every mutating call receives the authenticated ``Actor``; services raise
typed HTTP errors and leave the commit to the router.
"""
