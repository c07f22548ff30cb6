import random

import pytest
from fastapi.testclient import TestClient

from taskapi.main import create_app
from taskapi.services.challenge_service import ChallengeService
from taskapi.services.task_generator import TaskGenerator
from taskapi.services.token_service import TokenAuthority
from tests.test_utils import FakeClock


@pytest.fixture
def clock():
    """A controllable clock shared by the token authority and the service."""
    return FakeClock()


@pytest.fixture
def service(clock):
    """Create a fresh challenge service with a seeded generator."""
    return ChallengeService(
        tokens=TokenAuthority(ttl_seconds=300, leeway_seconds=0, clock=clock),
        generator=TaskGenerator(random.Random(1234)),
        clock=clock,
    )


@pytest.fixture
def client(service):
    """Create a test client around the fresh service, without the eviction scheduler."""
    app = create_app(service, cleanup_enabled=False)
    with TestClient(app) as test_client:
        yield test_client
