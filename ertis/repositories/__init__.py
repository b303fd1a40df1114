"""레포지토리 패키지 — 요청, 직원, 사용자, 알림 쿼리 계층.

Repository package — Query layer for requests, employees, users and
notifications. Repositories never commit; workload counters are changed
with single UPDATE statements.
"""
