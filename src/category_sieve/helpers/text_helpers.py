import re
from functools import lru_cache

from category_sieve.constants import TERM_TAG_PATTERN


def strip_tag(term: str) -> str:
    """Drop a trailing PubMed field tag: ``"Absorption[MeSH]"`` -> ``"Absorption"``."""
    return TERM_TAG_PATTERN.sub("", term).strip()


def clean_term(term: str) -> str:
    """Tag-stripped, lowercased form of a hierarchy term used for matching."""
    return strip_tag(term).lower()


@lru_cache(maxsize=4096)
def word_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive whole-word pattern for a literal term."""
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def contains_word(text: str, term: str) -> bool:
    if not term:
        return False
    return word_pattern(term).search(text) is not None


def count_words(text: str, term: str) -> int:
    if not term:
        return 0
    return len(word_pattern(term).findall(text))


def count_substrings(text: str, term: str) -> int:
    if not term:
        return 0
    return text.lower().count(term.lower())


def unique(items) -> list[str]:
    """Order-preserving de-duplication."""
    return list(dict.fromkeys(items))


def unique_casefold(items) -> list[str]:
    """Order-preserving de-duplication on lowercase+strip, keeping first casing."""
    seen: dict[str, str] = {}
    for item in items:
        key = item.lower().strip()
        if key and key not in seen:
            seen[key] = item
    return list(seen.values())


def highlight_keywords(
    text: str, keywords: list[str], open_tag: str = "<mark>", close_tag: str = "</mark>"
) -> str:
    """Wrap case-insensitive occurrences of each keyword in highlight tags.

    Keywords are tag-stripped and applied longest first in a single pass, so a
    short keyword never lands inside an already highlighted longer one.
    """
    if not text or not keywords:
        return text

    terms = sorted(
        {t for t in (strip_tag(k) for k in keywords) if t}, key=lambda t: (-len(t), t)
    )
    if not terms:
        return text

    pattern = re.compile("|".join(re.escape(t) for t in terms), re.IGNORECASE)
    return pattern.sub(lambda m: f"{open_tag}{m.group(0)}{close_tag}", text)
