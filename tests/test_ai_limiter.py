# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""Unit tests for ai_limiter module."""

import os
import sys
import unittest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from ai_limiter import AICallbackLimiter, PROMPT_THEMES, PROMPT_THEME_WORDS
from config import GenerationConfig


class TestAICallbackLimiter(unittest.TestCase):
    """Tests for AICallbackLimiter class."""

    def test_default_limits(self):
        """Test default limiter limits."""
        limiter = AICallbackLimiter()

        self.assertEqual(limiter.max_total, 10)
        self.assertEqual(limiter.total_calls, 0)
        self.assertEqual(limiter.total_tokens, 0)

    def test_can_call_at_limit(self):
        """Test can_call returns False when at limit."""
        limiter = AICallbackLimiter(max_total=2)

        limiter.record_call(PROMPT_THEMES)
        limiter.record_call(PROMPT_THEME_WORDS)

        self.assertFalse(limiter.can_call(PROMPT_THEMES))
        self.assertTrue(limiter.is_exhausted())

    def test_can_call_type_limit(self):
        """Test can_call respects type-specific limits."""
        limiter = AICallbackLimiter(max_total=10, limits={PROMPT_THEMES: 1})

        limiter.record_call(PROMPT_THEMES)

        self.assertFalse(limiter.can_call(PROMPT_THEMES))
        self.assertTrue(limiter.can_call(PROMPT_THEME_WORDS))

    def test_record_call(self):
        """Test recording calls updates counters."""
        limiter = AICallbackLimiter()

        limiter.record_call(PROMPT_THEMES, tokens_used=100)
        limiter.record_call(PROMPT_THEMES, tokens_used=150)

        self.assertEqual(limiter.total_calls, 2)
        self.assertEqual(limiter.total_tokens, 250)
        self.assertEqual(limiter.counts[PROMPT_THEMES], 2)

    def test_get_remaining(self):
        limiter = AICallbackLimiter(max_total=10, limits={PROMPT_THEME_WORDS: 5})

        limiter.record_call(PROMPT_THEME_WORDS)
        limiter.record_call(PROMPT_THEME_WORDS)
        limiter.record_call(PROMPT_THEMES)

        self.assertEqual(limiter.get_remaining(), 7)
        self.assertEqual(limiter.get_remaining(PROMPT_THEME_WORDS), 3)

    def test_get_remaining_capped_by_total(self):
        limiter = AICallbackLimiter(max_total=2, limits={PROMPT_THEMES: 5})
        limiter.record_call(PROMPT_THEME_WORDS)
        self.assertEqual(limiter.get_remaining(PROMPT_THEMES), 1)

    def test_get_stats(self):
        """Test getting statistics."""
        limiter = AICallbackLimiter(max_total=10)

        limiter.record_call(PROMPT_THEMES, tokens_used=100)
        limiter.record_call(PROMPT_THEME_WORDS, tokens_used=200)
        limiter.record_call(PROMPT_THEME_WORDS, success=False)

        stats = limiter.get_stats()

        self.assertEqual(stats['total_calls'], 3)
        self.assertEqual(stats['total_tokens'], 300)
        self.assertEqual(stats['remaining_calls'], 7)
        self.assertEqual(stats['calls_by_type'], {PROMPT_THEMES: 1, PROMPT_THEME_WORDS: 2})
        self.assertEqual(stats['failed_calls'], 1)

    def test_reset(self):
        """Test resetting the limiter."""
        limiter = AICallbackLimiter()

        limiter.record_call(PROMPT_THEMES, tokens_used=100)
        limiter.reset()

        self.assertEqual(limiter.total_calls, 0)
        self.assertEqual(limiter.total_tokens, 0)
        self.assertEqual(len(limiter.call_history), 0)
        self.assertTrue(limiter.can_call(PROMPT_THEMES))

    def test_from_config(self):
        config = GenerationConfig(max_ai_callbacks=4, limits={PROMPT_THEMES: 2})
        limiter = AICallbackLimiter.from_config(config)

        self.assertEqual(limiter.max_total, 4)
        self.assertEqual(limiter.limits, {PROMPT_THEMES: 2})
        # Copied, not shared
        limiter.limits[PROMPT_THEMES] = 9
        self.assertEqual(config.limits[PROMPT_THEMES], 2)


if __name__ == '__main__':
    unittest.main()
