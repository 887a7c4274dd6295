# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
AI call budget for the word source.

A scheduled generation run should make a handful of model calls (one for
themes, one for words, plus retries). The limiter caps them per prompt
type and in total.
"""

import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from config import GenerationConfig


PROMPT_THEMES = "themes"
PROMPT_THEME_WORDS = "theme_words"


@dataclass
class CallRecord:
    """Record of a single AI call."""
    prompt_type: str
    timestamp: float
    tokens_used: int = 0
    success: bool = True


@dataclass
class AICallbackLimiter:
    """
    Tracks and enforces AI call limits.

    Usage:
        limiter = AICallbackLimiter(max_total=10, limits={'themes': 3})

        if limiter.can_call('themes'):
            response = request_themes()
            limiter.record_call('themes', tokens_used=420)
    """
    max_total: int = 10
    limits: Dict[str, int] = field(default_factory=dict)
    counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    total_calls: int = 0
    total_tokens: int = 0
    call_history: List[CallRecord] = field(default_factory=list)

    def can_call(self, prompt_type: str) -> bool:
        """Check if another call of this type is allowed."""
        if self.total_calls >= self.max_total:
            return False
        return self.counts[prompt_type] < self.limits.get(prompt_type, self.max_total)

    def record_call(
        self,
        prompt_type: str,
        tokens_used: int = 0,
        success: bool = True
    ) -> None:
        """Record that an AI call was made."""
        self.counts[prompt_type] += 1
        self.total_calls += 1
        self.total_tokens += tokens_used
        self.call_history.append(CallRecord(
            prompt_type=prompt_type,
            timestamp=time.time(),
            tokens_used=tokens_used,
            success=success,
        ))

    def get_remaining(self, prompt_type: Optional[str] = None) -> int:
        """Remaining calls, overall or for one prompt type."""
        total_remaining = self.max_total - self.total_calls
        if prompt_type:
            type_limit = self.limits.get(prompt_type, self.max_total)
            return min(type_limit - self.counts[prompt_type], total_remaining)
        return total_remaining

    def is_exhausted(self) -> bool:
        return self.total_calls >= self.max_total

    def reset(self) -> None:
        """Reset all counters and history."""
        self.counts = defaultdict(int)
        self.total_calls = 0
        self.total_tokens = 0
        self.call_history = []

    def get_stats(self) -> Dict[str, Any]:
        """Usage statistics for logging."""
        failures = sum(1 for c in self.call_history if not c.success)
        return {
            'total_calls': self.total_calls,
            'total_tokens': self.total_tokens,
            'remaining_calls': self.get_remaining(),
            'calls_by_type': dict(self.counts),
            'failed_calls': failures,
        }

    @classmethod
    def from_config(cls, config: GenerationConfig) -> 'AICallbackLimiter':
        return cls(
            max_total=config.max_ai_callbacks,
            limits=dict(config.limits),
        )
