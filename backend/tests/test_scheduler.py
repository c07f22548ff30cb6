"""Tests for the task eviction scheduler."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from taskapi.config import settings
from taskapi.main import create_app
from taskapi.scheduler import cleanup_job, shutdown_scheduler, start_scheduler


class TestCleanupJob:
    def test_evicts_tasks_past_retention(self, service, clock):
        old = service.new_task()
        clock.advance(120)
        fresh = service.new_task()

        with patch.object(settings, "task_retention_seconds", 60):
            cleanup_job(service)

        assert service.store.get(old.task_id) is None
        assert service.store.get(fresh.task_id) is not None

    def test_tasks_within_retention_survive(self, service, clock):
        issued = service.new_task()
        clock.advance(30)

        with patch.object(settings, "task_retention_seconds", 60):
            cleanup_job(service)

        assert service.store.get(issued.task_id) is not None

    def test_failure_is_logged_not_raised(self, service, monkeypatch):
        def fail(max_age_seconds):
            raise RuntimeError("boom")

        monkeypatch.setattr(service, "evict_expired", fail)
        cleanup_job(service)


class TestSchedulerLifecycle:
    def test_start_registers_job(self, service):
        scheduler = start_scheduler(service)
        try:
            assert scheduler.running
            assert scheduler.get_job("evict_expired_tasks") is not None
        finally:
            shutdown_scheduler(scheduler)
        assert not scheduler.running

    def test_app_lifespan_runs_scheduler(self, service):
        app = create_app(service, cleanup_enabled=True)
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
