from __future__ import annotations

USER_AGENT = "PlanToCode-Client/0.1.0"
GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
