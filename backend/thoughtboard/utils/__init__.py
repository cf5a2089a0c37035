from thoughtboard.utils.security import hash_password, verify_password, create_user_token, decode_token
from thoughtboard.utils.rate_limit import (
    rate_limit,
    limiter,
    close_rate_limiter,
    caller_key,
    BUDGETS,
)

__all__ = [
    "hash_password", "verify_password", "create_user_token", "decode_token",
    "rate_limit", "limiter", "close_rate_limiter", "caller_key", "BUDGETS",
]
