from __future__ import annotations

"""
Token Counting Engine.

Provides the character-density estimate used for prompt budgeting and a
precise BPE count through tiktoken. The precise path degrades to the
estimate whenever the encoder cannot be loaded or fails.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import tiktoken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS & CACHE
# -----------------------------------------------------------------------------

CHARS_PER_TOKEN_AVG = 4
DEFAULT_TOKENIZER_MODEL = "gpt-4o"

_MODERN_ENCODING = "o200k_base"
_LEGACY_ENCODING = "cl100k_base"

# Encoders are costly to load, keep one per encoding name
_ENCODING_CACHE: Dict[str, Any] = {}

# -----------------------------------------------------------------------------
# PURE ESTIMATE
# -----------------------------------------------------------------------------

def estimate_tokens(text: Optional[str]) -> int:
    """
    Estimate the token count of `text` from its length.

    Args:
        text: Prompt text.

    Returns:
        int: ceil(len(text) / 4), or 0 for empty input.
    """
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)

# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for token counting algorithms.
    """

    @abstractmethod
    def count(self, text: str, model_id: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            model_id: Model identifier used to select an encoding.

        Returns:
            int: Total token count.
        """


class HeuristicStrategy(TokenizerStrategy):
    """Character density estimation, independent of the model."""

    def count(self, text: str, model_id: str) -> int:
        return estimate_tokens(text)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoding via tiktoken.

    Legacy GPT names use cl100k_base; everything else uses o200k_base as a
    close proxy for current model vocabularies.
    """

    def count(self, text: str, model_id: str) -> int:
        encoding = _get_encoding(self._encoding_name(model_id))
        return len(encoding.encode(text, disallowed_special=()))

    @staticmethod
    def _encoding_name(model_id: str) -> str:
        lower = model_id.lower()
        if any(x in lower for x in ("gpt-4-", "gpt-3.5", "legacy")):
            return _LEGACY_ENCODING
        return _MODERN_ENCODING


def _get_encoding(name: str) -> Any:
    if name not in _ENCODING_CACHE:
        try:
            _ENCODING_CACHE[name] = tiktoken.get_encoding(name)
        except ValueError:
            _ENCODING_CACHE[name] = tiktoken.get_encoding(_LEGACY_ENCODING)
    return _ENCODING_CACHE[name]

# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Model-aware token counting with a heuristic safety net.
    """

    def __init__(self) -> None:
        self.heuristic = HeuristicStrategy()
        self._tiktoken: Optional[TokenizerStrategy] = TiktokenStrategy()

    def count(self, text: str, model: str) -> int:
        """
        Count tokens precisely, falling back to the estimate on failure.

        Args:
            text: Raw input text.
            model: Target model identifier.

        Returns:
            int: Token count.
        """
        if not text:
            return 0

        if self._tiktoken is None:
            return self.heuristic.count(text, model)

        try:
            return self._tiktoken.count(text, model)
        except Exception as e:
            logger.warning(f"Tokenizer failed for '{model}': {e}. Using heuristic fallback.")
            return self.heuristic.count(text, model)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: str, model: str = DEFAULT_TOKENIZER_MODEL) -> int:
    """
    Count tokens for the target model through the shared service.

    Args:
        text: Input string content.
        model: Target model name (e.g. "gpt-4o", "gemini-2.0-flash").

    Returns:
        int: Total token count.
    """
    return _SERVICE_INSTANCE.count(text, model)
