# title_generator.py
# Alternative title suggestions for rejected or flagged titles

from typing import List, Optional
import logging
import random
import re

logger = logging.getLogger(__name__)

# Generic words that carry no identity of their own
GENERIC_WORDS_PATTERN = re.compile(r'\b(Daily|The|Times|News)\b', re.IGNORECASE | re.ASCII)
FALLBACK_BASE = "Paper"

SUFFIXES = ["Chronicle", "Voice", "Herald", "Monitor", "Journal"]
PREFIXES = ["The New", "Local", "Morning", "City", "Metro"]


def strip_generic_words(title: str) -> str:
    """Remove generic publication words; returns the fallback base if nothing is left."""
    base = GENERIC_WORDS_PATTERN.sub('', title or '').strip()
    return base or FALLBACK_BASE


def generate_alternatives(title: str, rng: Optional[random.Random] = None) -> List[str]:
    """
    Generate exactly three alternative titles.

    Args:
        title: The rejected or flagged title
        rng: Random source for the prefix/suffix picks. A fresh
            SystemRandom is used when omitted, so repeated calls vary.

    Returns:
        [<base> <suffix>, <prefix> <base>, The <base> Insight]
    """
    if rng is None:
        rng = random.SystemRandom()

    base = strip_generic_words(title)
    suffix = rng.choice(SUFFIXES)
    prefix = rng.choice(PREFIXES)

    alternatives = [
        f"{base} {suffix}",
        f"{prefix} {base}",
        f"The {base} Insight",
    ]
    logger.debug(f"Alternatives for {title!r}: {alternatives}")
    return alternatives
