import pytest
from fastapi.testclient import TestClient

from contact_api.core.config import Settings
from contact_api.core.dependencies import get_dispatcher, get_rate_limiter
from contact_api.core.limiter import limiter
from contact_api.main import create_app
from contact_api.services.dispatchers import Delivered, Dispatcher
from contact_api.services.rate_limiter import SubmissionRateLimiter

VALID_SUBMISSION = {
    "name": "Alice",
    "email": "alice@example.com",
    "message": "Hi",
    "website": "",
}


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingDispatcher(Dispatcher):
    mode = "recording"

    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result or Delivered(acknowledgment="queued")
        self.error = error

    async def send(self, submission, client_id):
        self.calls.append((submission, client_id))
        if self.error is not None:
            raise self.error
        return self.result


def make_settings(**overrides) -> Settings:
    # Ignore any developer .env so tests see the defaults
    return Settings(_env_file=None, **overrides)


@pytest.fixture(autouse=True)
def _disable_search_limiter():
    """Disable the slowapi limiter so rapid search requests don't return 429."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    return SubmissionRateLimiter(window_seconds=60, clock=clock)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def app():
    return create_app(make_settings())


@pytest.fixture
def client(app, rate_limiter, dispatcher):
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
