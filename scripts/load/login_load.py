"""Account endpoint load: create, verify and delete accounts, plus invalid-login checks.

    locust -f scripts/load/login_load.py --headless
"""
from __future__ import annotations

from locust import constant, task

from common import AccountJourneyUser, StagedShape, Thresholds, register_thresholds

register_thresholds(Thresholds(p95_ms=500, p99_ms=1000, max_fail_ratio=0.01, min_login_success=0.99))


class LoginLoadUser(AccountJourneyUser):
    wait_time = constant(1)
    create_budget_ms = 1000
    login_budget_ms = 500

    @task
    def valid_login_flow(self) -> None:
        self.account_round_trip()

    @task
    def invalid_login_attempts(self) -> None:
        self.invalid_logins()


class LoginLoadShape(StagedShape):
    stages = [(30, 20), (60, 30), (60, 50), (60, 50), (30, 0)]
    spawn_rate = 5
