"""
Middleware that reports the caller's remaining request budget.
"""
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


class RateLimitHeaderMiddleware(BaseHTTPMiddleware):
    """
    Adds X-RateLimit-* headers to responses of rate limited endpoints.
    The verdict is left in request.state.rate_budget by the rate_limit decorator.
    """

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        verdict = getattr(request.state, "rate_budget", None)
        if verdict is not None:
            response.headers.update(verdict.headers())

        return response
