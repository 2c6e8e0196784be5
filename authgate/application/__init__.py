# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import WerkzeugPasswordHasher
from .services.rate_limiter import LoginRateLimiter, RateLimitDecision
from .services.tokens import JwtTokenService

__all__ = [
    "JwtTokenService",
    "LoginRateLimiter",
    "RateLimitDecision",
    "WerkzeugPasswordHasher",
]
