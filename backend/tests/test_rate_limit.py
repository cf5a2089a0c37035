"""Request budgets: the sliding window, the endpoint decorator and per-user buckets."""
import pytest
from fastapi import FastAPI, Request
from httpx import AsyncClient, ASGITransport

from thoughtboard.config import settings
from thoughtboard.error_handlers import register_exception_handlers
from thoughtboard.middleware import RateLimitHeaderMiddleware
from thoughtboard.utils.rate_limit import BUDGETS, Budget, SlidingWindowLimiter, limiter, rate_limit


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def enabled(monkeypatch):
    """Switch limiting on with a fresh in-process limiter."""
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    limiter.reset()
    yield
    limiter.reset()


def budget_app(middleware: bool = False) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    if middleware:
        app.add_middleware(RateLimitHeaderMiddleware)

    @app.post("/login")
    @rate_limit("login")
    async def login(request: Request):
        return {"ok": True}

    return app


class TestSlidingWindowLimiter:
    @pytest.mark.asyncio
    async def test_counts_hits_inside_window(self):
        counter = SlidingWindowLimiter(use_redis=False, clock=FakeClock())

        verdicts = [await counter.hit("k", Budget(3, 60)) for _ in range(4)]

        assert [v.allowed for v in verdicts] == [True, True, True, False]
        assert verdicts[0].remaining == 2
        assert verdicts[3].remaining == 0
        assert verdicts[3].retry_after == 60

    @pytest.mark.asyncio
    async def test_window_slides_and_refusals_are_not_recorded(self):
        clock = FakeClock(1000.0)
        counter = SlidingWindowLimiter(use_redis=False, clock=clock)
        budget = Budget(2, 60)
        await counter.hit("k", budget)
        await counter.hit("k", budget)

        clock.now = 1030.0
        refused = await counter.hit("k", budget)
        clock.now = 1060.5
        after = await counter.hit("k", budget)

        assert not refused.allowed
        assert refused.retry_after == 30
        assert after.allowed
        assert after.remaining == 1

    @pytest.mark.asyncio
    async def test_buckets_are_independent(self):
        counter = SlidingWindowLimiter(use_redis=False, clock=FakeClock())
        await counter.hit("user:a", Budget(1, 60))

        verdict = await counter.hit("user:b", Budget(1, 60))

        assert verdict.allowed

    @pytest.mark.asyncio
    async def test_reset_forgets_buckets(self):
        counter = SlidingWindowLimiter(use_redis=False, clock=FakeClock())
        await counter.hit("k", Budget(1, 60))

        counter.reset()

        assert (await counter.hit("k", Budget(1, 60))).allowed

    @pytest.mark.asyncio
    async def test_unreachable_redis_falls_back_to_memory(self):
        counter = SlidingWindowLimiter(redis_url="redis://127.0.0.1:1/0", use_redis=True)

        verdict = await counter.hit("k", Budget(2, 60))

        assert verdict.allowed
        assert verdict.limit == 2
        assert counter.backend == "memory"
        await counter.close()


class TestRateLimitDecorator:
    def test_unknown_budget_is_rejected_at_definition(self):
        with pytest.raises(KeyError):
            rate_limit("nonexistent")

    @pytest.mark.asyncio
    async def test_spent_budget_is_429_with_retry_headers(self, enabled, monkeypatch):
        monkeypatch.setitem(BUDGETS, "login", Budget(2, 60))

        async with AsyncClient(transport=ASGITransport(app=budget_app()), base_url="http://test") as client:
            codes = [(await client.post("/login")).status_code for _ in range(2)]
            blocked = await client.post("/login")

        assert codes == [200, 200]
        assert blocked.status_code == 429
        assert blocked.json()["error"] == "GEN_003"
        assert blocked.json()["details"] == {"retry_after": 60}
        assert blocked.headers["Retry-After"] == "60"
        assert blocked.headers["X-RateLimit-Remaining"] == "0"

    @pytest.mark.asyncio
    async def test_middleware_reports_remaining_budget(self, enabled, monkeypatch):
        monkeypatch.setitem(BUDGETS, "login", Budget(2, 60))

        async with AsyncClient(
            transport=ASGITransport(app=budget_app(middleware=True)), base_url="http://test"
        ) as client:
            response = await client.post("/login")

        assert response.status_code == 200
        assert response.headers["X-RateLimit-Limit"] == "2"
        assert response.headers["X-RateLimit-Remaining"] == "1"
        assert "Retry-After" not in response.headers

    @pytest.mark.asyncio
    async def test_disabled_limiting_never_refuses(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
        monkeypatch.setitem(BUDGETS, "login", Budget(1, 60))

        async with AsyncClient(transport=ASGITransport(app=budget_app()), base_url="http://test") as client:
            codes = [(await client.post("/login")).status_code for _ in range(3)]

        assert codes == [200, 200, 200]


class TestPerUserBuckets:
    @pytest.mark.asyncio
    async def test_each_user_has_own_read_budget(self, client, alice, bob, enabled, monkeypatch):
        monkeypatch.setitem(BUDGETS, "read", Budget(2, 60))

        first = await client.get("/api/boards", headers=alice["headers"])
        second = await client.get("/api/boards", headers=alice["headers"])
        # The profile draws from the same budget as the board list
        spent = await client.get("/api/auth/me", headers=alice["headers"])
        other_user = await client.get("/api/boards", headers=bob["headers"])

        assert [first.status_code, second.status_code] == [200, 200]
        assert spent.status_code == 429
        assert spent.json()["error"] == "GEN_003"
        assert other_user.status_code == 200

    @pytest.mark.asyncio
    async def test_budgets_are_counted_separately(self, client, alice, enabled, monkeypatch):
        monkeypatch.setitem(BUDGETS, "read", Budget(1, 60))
        await client.get("/api/boards", headers=alice["headers"])

        created = await client.post("/api/boards", json={"title": "Trip"}, headers=alice["headers"])

        assert created.status_code == 201
