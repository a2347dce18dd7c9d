from __future__ import annotations

"""
Network Communication Infrastructure.

Exposes the Gemini client and its helpers from a single import point.
"""

from plantocode.infra.network.gemini_client import (
    GeminiClient,
    client_from_env,
    options_from_config,
    send_prompt,
)

__all__ = [
    "GeminiClient",
    "client_from_env",
    "options_from_config",
    "send_prompt",
]
