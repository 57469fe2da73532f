"""
Text normalization utilities for IDML stories.

Handles InDesign forced breaks, whitespace collapsing, style-name decoding
and the recovery of link targets that were typed as plain trailing text.
"""
from __future__ import annotations

import re
from typing import List, Tuple
from urllib.parse import unquote


class TextNormalizer:
    """Normalizes text extracted from IDML story content."""

    # InDesign special characters that need normalization
    SPECIAL_CHARS = {
        '\u2028': ' ',  # Forced line break -> space
        '\u2029': ' ',  # Paragraph separator -> space
        '\r': '\n',      # Carriage return -> newline
        '\u00ad': '',   # Discretionary hyphen -> remove
        '\u200b': '',   # Zero-width space -> remove
        '\ufeff': '',   # Byte order mark -> remove
    }

    WHITESPACE_PATTERN = re.compile(r'\s+')

    def normalize_text(self, text: str) -> str:
        """Normalize story text into a single trimmed line."""
        if not text:
            return ''

        normalized = self._replace_special_chars(text)
        return self.WHITESPACE_PATTERN.sub(' ', normalized).strip()

    def _replace_special_chars(self, text: str) -> str:
        for original, replacement in self.SPECIAL_CHARS.items():
            text = text.replace(original, replacement)
        return text


_DEFAULT_NORMALIZER = TextNormalizer()

# Trailing punctuation allowed after a URL-like token (Unicode "P" categories
# that occur in magazine copy).
_PUNCTUATION_CHARS = '.,;:!?()[]{}"\'-_/@#%&*\\«»“”„‘’‚–—…¡¿·'
_PUNCTUATION = re.escape(_PUNCTUATION_CHARS)

_TRAILING_URL_PATTERN = re.compile(
    r'(https?://\S+|(?:www\.)?[a-z0-9.-]+\.[a-z]{2,}(?:/[\w\-./%#?=&+]*)?)'
    r'[\s' + _PUNCTUATION + r']*$',
    re.IGNORECASE,
)
# Longest whitespace-free token considered as a trailing URL.
MAX_URL_LENGTH = 2048

_URL_TRAILING_CHARS = '.,;:!?)”\'"'
_SCHEME_PATTERN = re.compile(r'^https?://', re.IGNORECASE)
_KEY_PATTERN = re.compile(r'[^a-z0-9_\-]')


def normalize_text(text: str) -> str:
    """Collapse whitespace and forced breaks. Idempotent."""
    return _DEFAULT_NORMALIZER.normalize_text(text)


def normalize_url(url: str) -> str:
    """Return ``url`` with an ``https://`` scheme when none is present."""
    url = url.strip()
    if not url:
        return ''
    if _SCHEME_PATTERN.match(url):
        return url
    return 'https://' + url


def extract_trailing_url(text: str) -> Tuple[str, str]:
    """Split a trailing URL or bare domain off ``text``.

    Returns ``(remaining_text, normalized_url)``. When no URL-like token ends
    the text, the trimmed text and an empty URL are returned.
    """
    text = text.strip()
    if not text:
        return '', ''

    start, end = _last_token_bounds(text)
    if end - start > MAX_URL_LENGTH:
        return text, ''

    match = _TRAILING_URL_PATTERN.search(text, start)
    if match is None:
        return text, ''

    url = normalize_url(match.group(1).rstrip(_URL_TRAILING_CHARS))
    return text[:match.start()].strip(), url


def _last_token_bounds(text: str) -> Tuple[int, int]:
    """Bounds of the last token once trailing whitespace and punctuation are cut."""
    end = len(text)
    while end and (text[end - 1].isspace() or text[end - 1] in _PUNCTUATION_CHARS):
        end -= 1
    start = end
    while start and not text[start - 1].isspace():
        start -= 1
    return start, end


def strip_urls(text: str) -> str:
    """Remove a standalone trailing domain or URL from a text blob."""
    remaining, _ = extract_trailing_url(text)
    return remaining


def split_lines(text: str) -> List[str]:
    """Split on any line break, trim each line, and drop empty lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def decode_style_name(style: str) -> str:
    """Percent-decode a style reference (some exports encode ``:`` as ``%3a``)."""
    decoded = unquote(style)
    return decoded if decoded else style


def is_url_character_style(character_style: str) -> bool:
    """True when a character style marks its run as a link target."""
    decoded = decode_style_name(character_style)
    if decoded.endswith('/URL'):
        return True
    lowered = decoded.lower()
    return 'www' in lowered or 'url' in lowered


def normalize_key(value: str) -> str:
    """Lowercase ``value`` and keep only ``[a-z0-9_-]``."""
    return _KEY_PATTERN.sub('', value.lower())
