# similarity_engine.py
# Title similarity and risk classification engine

from typing import List, Dict, Any, Optional, NamedTuple, Tuple
import logging
import math
import re

from reference_data import ReferenceData, default_reference_data

logger = logging.getLogger(__name__)

# =============================================================================
# POLICY CONSTANTS
# =============================================================================

KEYWORD_PENALTY = 50
SHORT_TITLE_PENALTY = 30
MIN_TITLE_LENGTH = 3

STRONG_SIMILARITY_THRESHOLD = 60
WEAK_SIMILARITY_THRESHOLD = 40
STRONG_SIMILARITY_WEIGHT = 0.8
WEAK_SIMILARITY_PENALTY = 20

MAX_SCORE = 100
MEDIUM_RISK_THRESHOLD = 30
HIGH_RISK_THRESHOLD = 70

# Publisher live preview uses its own (strict) cut-offs
PREVIEW_HIGH_THRESHOLD = 70
PREVIEW_CAUTION_THRESHOLD = 30

RISK_LEVELS = ("Low", "Medium", "High")

RISK_HEADLINES = {
    "High": "High Risk - Likely Blocked",
    "Medium": "Medium Risk - Manual Check",
    "Low": "Low Risk - Likely Approved",
}

NO_CONFLICTS_NOTE = "No immediate conflicts found."

# =============================================================================
# EDIT DISTANCE
# =============================================================================

def levenshtein_distance(a: str, b: str) -> int:
    """
    Edit distance between two strings.

    Builds the full (len(b)+1) x (len(a)+1) table; titles are short so no
    banding is needed.

    Args:
        a: Source string
        b: Target string

    Returns:
        Minimum number of single-character insertions, deletions and
        substitutions turning ``a`` into ``b``
    """
    matrix = [[i] + [0] * len(a) for i in range(len(b) + 1)]
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(
                    matrix[i - 1][j - 1],
                    matrix[i][j - 1],
                    matrix[i - 1][j],
                )

    return matrix[len(b)][len(a)]


def similarity_percent(a: str, b: str) -> float:
    """Edit-distance similarity (0-100) relative to the longer string."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return (1 - levenshtein_distance(a, b) / longest) * 100

# =============================================================================
# PHONETIC ENCODING
# =============================================================================

_NON_LETTERS = re.compile(r"[^a-z]")
_SILENT_LETTERS = re.compile(r"[aeiouwh]")
_CONSONANT_CLASSES = str.maketrans({
    'b': '1', 'f': '1', 'p': '1', 'v': '1',
    'c': '2', 'g': '2', 'j': '2', 'k': '2', 'q': '2', 's': '2', 'x': '2', 'z': '2',
    'd': '3', 't': '3',
    'l': '4',
    'm': '5', 'n': '5',
    'r': '6',
})
PHONETIC_CODE_LENGTH = 4


def phonetic_code(text: str) -> str:
    """Short consonant-class code; similar-sounding words share a code."""
    s = _NON_LETTERS.sub('', (text or '').lower())
    s = _SILENT_LETTERS.sub('', s)
    return s.translate(_CONSONANT_CLASSES)[:PHONETIC_CODE_LENGTH]


def sounds_alike(a: str, b: str) -> bool:
    code_a = phonetic_code(a)
    return bool(code_a) and code_a == phonetic_code(b)

# =============================================================================
# RISK ANALYSIS
# =============================================================================

def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_risk(score: float) -> str:
    """
    Classify a finalized score into a risk tier.

    Thresholds:
      0-29:   Low
      30-69:  Medium
      70+:    High
    """
    if score >= HIGH_RISK_THRESHOLD:
        return "High"
    elif score >= MEDIUM_RISK_THRESHOLD:
        return "Medium"
    else:
        return "Low"


class AnalysisResult(NamedTuple):
    """Outcome of a single title analysis."""
    score: int = 0
    risk: str = "Low"
    flags: Tuple[str, ...] = ()
    matches: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "risk": self.risk,
            "flags": list(self.flags),
            "matches": list(self.matches),
        }


class RiskAnalyzer:
    """
    Scores a proposed title against an injected reference corpus and
    banned-keyword list.

    Three independent screens run on every non-empty title and their
    contributions are summed before clamping:

    1. Keyword screen: +50 when any banned term occurs as a substring
    2. Similarity screen: edit-distance similarity against the closest
       existing title (+sim*0.8 above 60%, +20 above 40%)
    3. Length screen: +30 when the normalized title is under 3 characters
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference
        # Corpus is lowercased once; display keeps the original casing
        self._corpus = tuple((title, title.lower()) for title in reference.titles)
        self._banned_keywords = tuple(k.lower() for k in reference.banned_keywords)

    def keyword_screen(self, normalized: str) -> Tuple[float, List[str]]:
        found = [k for k in self._banned_keywords if k in normalized]
        if not found:
            return 0, []
        return KEYWORD_PENALTY, [f"Contains restricted term(s): {', '.join(found)}"]

    def closest_title(self, normalized: str) -> Tuple[Optional[str], float]:
        """
        Find the corpus title with the highest similarity to ``normalized``.

        Returns:
            (title, similarity) where title is None when nothing beats 0%
        """
        best_title = None
        best_sim = 0.0
        for title, lowered in self._corpus:
            sim = similarity_percent(normalized, lowered)
            # Strictly greater: the first title seen wins ties
            if sim > best_sim:
                best_sim = sim
                best_title = title
        return best_title, best_sim

    def similarity_screen(self, normalized: str) -> Tuple[float, List[str]]:
        title, sim = self.closest_title(normalized)
        if sim > STRONG_SIMILARITY_THRESHOLD:
            return sim * STRONG_SIMILARITY_WEIGHT, [f'Similar to: "{title}" ({_round_half_up(sim)}%)']
        elif sim > WEAK_SIMILARITY_THRESHOLD:
            return WEAK_SIMILARITY_PENALTY, [f'Resembles: "{title}"']
        return 0, []

    def length_screen(self, normalized: str) -> Tuple[float, List[str]]:
        if len(normalized) < MIN_TITLE_LENGTH:
            return SHORT_TITLE_PENALTY, ["Title is too short."]
        return 0, []

    def analyze(self, title: Optional[str]) -> AnalysisResult:
        if not title:
            return AnalysisResult()

        normalized = title.lower().strip()

        keyword_score, flags = self.keyword_screen(normalized)
        similarity_score, matches = self.similarity_screen(normalized)
        length_score, length_flags = self.length_screen(normalized)
        flags.extend(length_flags)

        raw_score = keyword_score + similarity_score + length_score
        score = max(0, min(MAX_SCORE, _round_half_up(raw_score)))
        risk = classify_risk(score)

        logger.debug(
            "Analyzed %r: raw=%.2f score=%d risk=%s flags=%d matches=%d",
            title, raw_score, score, risk, len(flags), len(matches)
        )

        return AnalysisResult(score, risk, tuple(flags), tuple(matches))


_DEFAULT_ANALYZER = None


def get_default_analyzer() -> RiskAnalyzer:
    """Analyzer over the default reference tables, built once on first use."""
    global _DEFAULT_ANALYZER

    if _DEFAULT_ANALYZER is None:
        _DEFAULT_ANALYZER = RiskAnalyzer(default_reference_data())
    return _DEFAULT_ANALYZER


def analyze(title: Optional[str], reference: Optional[ReferenceData] = None) -> AnalysisResult:
    """
    Convenience wrapper for one-off checks.

    Long-lived callers should build a RiskAnalyzer once from their own
    ReferenceData; without ``reference`` this uses the default tables.
    """
    analyzer = RiskAnalyzer(reference) if reference is not None else get_default_analyzer()
    return analyzer.analyze(title)

# =============================================================================
# EXPLANATIONS
# =============================================================================

def live_feedback(score: float) -> str:
    """Label shown while a publisher is still typing a title."""
    if score > PREVIEW_HIGH_THRESHOLD:
        return "High Risk"
    elif score > PREVIEW_CAUTION_THRESHOLD:
        return "Caution"
    return "Looks Good"


def describe_verdict(result: AnalysisResult) -> Dict[str, Any]:
    """
    Build the human-readable verdict for an analysis result.

    Args:
        result: Finalized analysis

    Returns:
        Dict with the tier headline, score text and the detail sections
        (similarity conflicts first, then policy warnings)
    """
    sections = []
    if result.matches:
        sections.append({"heading": "Similarity Conflict", "items": list(result.matches)})
    if result.flags:
        sections.append({"heading": "Policy Warnings", "items": list(result.flags)})

    return {
        "risk": result.risk,
        "headline": RISK_HEADLINES[result.risk],
        "score_text": f"{result.score}% Risk",
        "sections": sections,
        "note": NO_CONFLICTS_NOTE if not sections else None,
    }


# SELF TEST
if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    tests = [
        "The Times of India",
        "Hindustan Tymes",
        "Police Gazette",
        "Morning Voice",
        "xy",
    ]

    for t in tests:
        print(f"\nTesting: {t}")
        result = analyze(t)
        print(f"Score: {result.score}%, Risk: {result.risk}")
        for line in result.matches + result.flags:
            print(f"  - {line}")
        print("-" * 80)
