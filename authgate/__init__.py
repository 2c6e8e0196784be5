# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Username/password authentication service with lockout and rate limiting."""

__version__ = "0.1.0"
