# Copyright (c) 2026 TrailLensCo
# All rights reserved.
#
# This file is proprietary and confidential.
# Unauthorized copying, distribution, or use of this file,
# via any medium, is strictly prohibited without the express
# written permission of TrailLensCo.

"""
AI word source using the Claude API.

Provides candidate words for new puzzles:
- Generate a handful of themes in the target language
- Generate 10-15 words for one randomly chosen theme

Uses the async Anthropic client with call limiting and prompt templates.
Without an API key, built-in themes can stand in for the model.
"""

import json
import logging
import random
import re
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Any

import anthropic
import yaml

from ai_limiter import AICallbackLimiter, PROMPT_THEMES, PROMPT_THEME_WORDS
from config import DEFAULT_MODEL, VALID_LANGUAGES
from models import normalize_word
from prompt_loader import PromptLoader, PromptRenderError


VALID_THEME_DIFFICULTIES = ["easy", "medium", "hard"]


@dataclass
class Theme:
    """A word game theme."""
    theme: str
    description: str
    language: str
    difficulty: str = "medium"


@dataclass
class ThemeWords:
    """Candidate words generated for a theme."""
    theme: Theme
    words: List[str] = field(default_factory=list)


BUILTIN_THEMES: Dict[str, List[ThemeWords]] = {
    "finnish": [
        ThemeWords(
            Theme("Metsä", "Suomalaisen metsän puita, eläimiä ja asioita", "finnish", "easy"),
            ["KUUSI", "MÄNTY", "KOIVU", "SAMMAL", "SIENI", "KÄPY", "MUSTIKKA",
             "POLKU", "KETTU", "JÄNIS", "ORAVA", "KANTO", "HIRVI"],
        ),
        ThemeWords(
            Theme("Keittiö", "Keittiön välineitä ja ruokia", "finnish", "medium"),
            ["KATTILA", "LUSIKKA", "HAARUKKA", "VEITSI", "PANNU", "LIESI",
             "KUPPI", "LAUTANEN", "UUNI", "VISPILÄ", "KAHVI", "LEIPÄ"],
        ),
    ],
    "english": [
        ThemeWords(
            Theme("Kitchen", "Tools and dishes found in a kitchen", "english", "easy"),
            ["KETTLE", "SPOON", "FORK", "LADLE", "OVEN", "WHISK", "PLATE",
             "SKILLET", "TOASTER", "GRATER", "BOWL", "KNIFE"],
        ),
        ThemeWords(
            Theme("Weather", "Words about weather and the sky", "english", "medium"),
            ["THUNDER", "RAIN", "CLOUD", "STORM", "BREEZE", "FROST", "SLEET",
             "DRIZZLE", "SUNSHINE", "FOG", "HAIL", "RAINBOW"],
        ),
    ],
}


class AIWordGenerator:
    """
    Generates themes and candidate words using the Claude API.

    Features:
    - Theme list generation in the puzzle language
    - Word list generation for a chosen theme
    - Callback limiting to prevent runaway token usage
    - External prompt templates with inline fallbacks
    - Built-in themes when no API key is configured
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        limiter: Optional[AICallbackLimiter] = None,
        prompt_loader: Optional[PromptLoader] = None,
        logger: Optional[logging.Logger] = None,
        fallback_to_builtin_themes: bool = True,
        min_word_length: int = 3,
        rng: Optional[random.Random] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize the AI word generator.

        Args:
            api_key: Anthropic API key
            model: Claude model to use
            limiter: Optional AICallbackLimiter for tracking limits
            prompt_loader: Optional PromptLoader for external prompts
            logger: Logger instance (uses module logger if not provided)
            fallback_to_builtin_themes: Use built-in themes without a client
            min_word_length: Shortest word requested from the model
            rng: Optional random source for theme selection
            client: Preconfigured async client (overrides api_key)
        """
        self.model = model
        self.limiter = limiter or AICallbackLimiter()
        self.prompt_loader = prompt_loader
        self.logger = logger if logger else logging.getLogger(__name__)
        self.fallback_to_builtin_themes = fallback_to_builtin_themes
        self.min_word_length = min_word_length
        self.rng = rng or random.Random()

        if client is not None:
            self.client = client
        elif api_key:
            self.client = anthropic.AsyncAnthropic(api_key=api_key)
        else:
            self.client = None

        self.stats = {
            "api_calls": 0,
            "tokens_used": 0,
            "themes_generated": 0,
            "words_generated": 0,
        }

    def is_available(self) -> bool:
        """Check if AI generation is available."""
        return self.client is not None

    async def _make_request(
        self,
        prompt_type: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1024,
        temperature: float = 0.9,
        model: Optional[str] = None
    ) -> Optional[str]:
        """
        Make an API request with rate limiting.

        Returns:
            Response text or None if limited/failed
        """
        if not self.client:
            return None

        if not self.limiter.can_call(prompt_type):
            self.logger.warning(f"AI limit reached for {prompt_type}")
            return None

        try:
            self.stats["api_calls"] += 1

            response = await self.client.messages.create(
                model=model or self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}]
            )

            text = response.content[0].text

            tokens = response.usage.input_tokens + response.usage.output_tokens
            self.stats["tokens_used"] += tokens
            self.limiter.record_call(prompt_type, tokens_used=tokens, success=True)

            return text

        except Exception as e:
            self.logger.error(f"AI request error for {prompt_type}: {e}", exc_info=True)
            self.limiter.record_call(prompt_type, success=False)
            return None

    def _render(
        self,
        prompt_name: str,
        fallback: Tuple[str, str],
        **variables
    ) -> Tuple[str, str, Dict[str, Any]]:
        """Render a template from the loader, or use the inline prompts."""
        if self.prompt_loader:
            try:
                template = self.prompt_loader.get(prompt_name)
                system_prompt, user_prompt = template.render(**variables)
                settings = {
                    "model": template.model,
                    "temperature": template.temperature,
                    "max_tokens": template.max_tokens,
                }
                return system_prompt, user_prompt, settings
            except (KeyError, PromptRenderError) as e:
                self.logger.warning(f"Using inline {prompt_name} prompt: {e}")
        return fallback[0], fallback[1], {}

    async def generate_themes(self, language: str = "finnish") -> Optional[List[Theme]]:
        """
        Generate 3-5 themes in the target language.

        Returns:
            List of Theme, or None if the request failed
        """
        system_prompt, user_prompt, settings = self._render(
            'themes',
            self._build_theme_prompts(language),
            language=language,
        )

        response = await self._make_request(
            PROMPT_THEMES, system_prompt, user_prompt, **settings
        )
        if not response:
            return None

        themes = self._parse_themes_response(response)
        self.stats["themes_generated"] += len(themes)
        return themes

    async def generate_theme_words(self, theme: Theme) -> Optional[List[str]]:
        """
        Generate 10-15 words for a theme.

        Returns:
            List of uppercase words, or None if the request failed
        """
        system_prompt, user_prompt, settings = self._render(
            'theme_words',
            self._build_word_prompts(theme),
            language=theme.language,
            min_length=self.min_word_length,
            theme=theme.theme,
            description=theme.description,
        )

        response = await self._make_request(
            PROMPT_THEME_WORDS, system_prompt, user_prompt, **settings
        )
        if not response:
            return None

        words = self._parse_words_response(response)
        self.stats["words_generated"] += len(words)
        return words

    async def get_theme_words(self, language: str = "finnish") -> Optional[ThemeWords]:
        """
        Pick a random theme and generate its candidate words.

        Returns:
            ThemeWords, or None if no usable theme or words were produced
        """
        if not self.client:
            if self.fallback_to_builtin_themes:
                return self._fallback_theme_words(language)
            self.logger.error("No AI client configured and built-in themes disabled")
            return None

        themes = await self.generate_themes(language)
        if not themes:
            self.logger.error("Theme generation returned no themes")
            return None

        theme = self.rng.choice(themes)
        self.logger.info(
            f"Selected theme: {theme.theme} ({theme.language}, {theme.difficulty}) "
            f"- {theme.description}"
        )

        words = await self.generate_theme_words(theme)
        if not words:
            self.logger.error(f"Word generation returned no words for {theme.theme}")
            return None

        self.logger.info(f"Generated theme words: {', '.join(words)}")
        return ThemeWords(theme=theme, words=words)

    def _build_theme_prompts(self, language: str) -> Tuple[str, str]:
        """Build theme list prompts."""
        system_prompt = f"""Generate 3-5 random themes for a word game. Each theme should be specific
enough to generate 10-15 related words, but broad enough to have variety. Themes
can be timely (related to current events or seasons) or generic. The target
language should be {language}.

Respond with ONLY a JSON object, no other text:
{{"themes": [{{"theme": "...", "description": "...", "language": "{language}", "difficulty": "medium"}}]}}"""

        user_prompt = "Generate new themes."
        return system_prompt, user_prompt

    def _build_word_prompts(self, theme: Theme) -> Tuple[str, str]:
        """Build theme word prompts."""
        system_prompt = f"""Generate a list of 10-15 words related to the theme. Words should be in
{theme.language}. Include words of various lengths but no shorter than
{self.min_word_length} letters. All the words should be in the target language and
the words should not include proper names.

Respond with ONLY a JSON object, no other text:
{{"words": ["...", "..."]}}"""

        user_prompt = f"""Generate words related to: {theme.theme}
Description: {theme.description}"""
        return system_prompt, user_prompt

    def _load_structured(self, text: str) -> Optional[Any]:
        """Extract a JSON object from a response, falling back to YAML."""
        json_match = re.search(r'\{.*\}', text, re.DOTALL)
        if json_match:
            try:
                return json.loads(json_match.group())
            except json.JSONDecodeError:
                pass

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError:
            return None

    def _parse_themes_response(self, text: str) -> List[Theme]:
        """Parse a theme list, dropping entries with unknown values."""
        data = self._load_structured(text)
        if not isinstance(data, dict) or not isinstance(data.get('themes'), list):
            self.logger.warning("Theme response did not contain a theme list")
            return []

        themes = []
        for item in data['themes']:
            if not isinstance(item, dict):
                continue
            name = str(item.get('theme', '')).strip()
            language = str(item.get('language', '')).lower()
            difficulty = str(item.get('difficulty', 'medium')).lower()
            if not name or language not in VALID_LANGUAGES:
                continue
            if difficulty not in VALID_THEME_DIFFICULTIES:
                continue
            themes.append(Theme(
                theme=name,
                description=str(item.get('description', '')).strip(),
                language=language,
                difficulty=difficulty,
            ))
        return themes

    def _parse_words_response(self, text: str) -> List[str]:
        """Parse a word list into normalized, unique words."""
        data = self._load_structured(text)
        if isinstance(data, dict):
            items = data.get('words')
        else:
            items = data
        if not isinstance(items, list):
            self.logger.warning("Word response did not contain a word list")
            return []

        words = []
        for item in items:
            word = normalize_word(str(item))
            if word.isalpha() and len(word) >= self.min_word_length and word not in words:
                words.append(word)
        return words

    def _fallback_theme_words(self, language: str) -> Optional[ThemeWords]:
        """Built-in themes used when AI is unavailable."""
        options = BUILTIN_THEMES.get(language)
        if not options:
            self.logger.error(f"No built-in themes for language '{language}'")
            return None
        chosen = self.rng.choice(options)
        self.logger.info(f"Using built-in theme: {chosen.theme.theme}")
        return ThemeWords(theme=chosen.theme, words=list(chosen.words))

    def get_stats(self) -> Dict:
        """Get usage statistics."""
        stats = self.stats.copy()
        stats['limiter'] = self.limiter.get_stats()
        return stats
