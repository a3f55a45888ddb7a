"""Gentler account endpoint load for shared environments.

    locust -f scripts/load/login_load_light.py --headless
"""
from __future__ import annotations

from locust import constant, task

from common import AccountJourneyUser, StagedShape, Thresholds, register_thresholds

register_thresholds(Thresholds(p95_ms=1000, p99_ms=2000, max_fail_ratio=0.05, min_login_success=0.95))


class LightLoginUser(AccountJourneyUser):
    wait_time = constant(2)

    @task
    def valid_login_flow(self) -> None:
        self.account_round_trip()


class LightLoginShape(StagedShape):
    stages = [(30, 5), (60, 5), (30, 10), (60, 10), (30, 20), (60, 20), (30, 0)]
