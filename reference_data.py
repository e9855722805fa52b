import logging
import os
from typing import NamedTuple, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(__file__)
DATA_DIR = os.path.join(BASE_DIR, 'database')

TITLES_ENV = 'PATRA_TITLES_FILE'
BANNED_KEYWORDS_ENV = 'PATRA_BANNED_KEYWORDS_FILE'

TITLES_BASENAME = 'EXISTING_TITLES'
BANNED_KEYWORDS_BASENAME = 'BANNED_KEYWORDS'
SUPPORTED_EXTENSIONS = ['.xlsx', '.xls', '.csv']

DEFAULT_EXISTING_TITLES = (
    "The Times of India", "Hindustan Times", "Dainik Bhaskar",
    "Rajasthan Patrika", "The Hindu", "Amar Ujala",
    "Malayala Manorama", "Eenadu", "Sakshi", "Daily Thanthi",
    "Indian Express", "Economic Times", "Financial Express",
)

DEFAULT_BANNED_KEYWORDS = (
    "police", "army", "government", "cbi", "court", "judge",
    "corruption", "bribe", "scam", "anti-national", "terror", "president", "pm",
)


class ReferenceData(NamedTuple):
    """Immutable reference tables the analyzer scores against."""
    titles: Tuple[str, ...]
    banned_keywords: Tuple[str, ...]

    @classmethod
    def from_sequences(cls, titles: Sequence[str], banned_keywords: Sequence[str]) -> 'ReferenceData':
        # Keywords are matched against lowercased input
        return cls(tuple(titles), tuple(k.lower() for k in banned_keywords))


def default_reference_data() -> ReferenceData:
    return ReferenceData(DEFAULT_EXISTING_TITLES, DEFAULT_BANNED_KEYWORDS)


def _read_column_from_file(path, column):
    """Read one text column from a CSV or Excel file, preserving row order and text."""
    if not os.path.exists(path):
        logger.error(f"Reference file not found: {path}")
        raise FileNotFoundError(f"Reference file not found: {path}")

    _, ext = os.path.splitext(path)
    try:
        if ext.lower() in ['.xlsx', '.xls']:
            df = pd.read_excel(path)
        else:
            df = pd.read_csv(path, encoding='utf-8')
    except Exception as e:
        logger.error(f"Failed to read reference file {path}: {e}")
        raise RuntimeError(f"Failed to read reference file {path}: {e}")

    # Case-insensitive header match, else a lone column
    selected = None
    for col in df.columns:
        if str(col).strip().lower() == column:
            selected = col
            break
    if selected is None:
        if len(df.columns) == 1:
            selected = df.columns[0]
        else:
            raise RuntimeError(f"Reference file {path} missing a clear '{column}' column")

    values = df[selected].dropna().astype(str).str.strip()
    return values[values != ''].tolist()


def load_titles(path):
    """Load existing titles from a CSV/Excel file with a ``title`` column."""
    titles = _read_column_from_file(path, 'title')
    logger.info(f"Existing titles loaded from {path}: {len(titles)}")
    return titles


def load_banned_keywords(path):
    """Load banned keywords (lowercased) from a CSV/Excel file with a ``keyword`` column."""
    keywords = [k.lower() for k in _read_column_from_file(path, 'keyword')]
    logger.info(f"Banned keywords loaded from {path}: {len(keywords)}")
    return keywords


def _find_data_file(basename, data_dir):
    for ext in SUPPORTED_EXTENSIONS:
        path = os.path.join(data_dir, basename + ext)
        if os.path.exists(path):
            return path
    return None


def _resolve_path(explicit, env_var, basename, data_dir):
    if explicit:
        return explicit
    if os.environ.get(env_var):
        return os.environ[env_var]
    return _find_data_file(basename, data_dir)


def load_reference_data(titles_path: Optional[str] = None,
                        keywords_path: Optional[str] = None,
                        data_dir: str = DATA_DIR) -> ReferenceData:
    """
    Assemble the reference tables once at startup.

    Each table comes from, in order: the explicit path, its environment
    variable, ``<data_dir>/<BASENAME>.{xlsx,xls,csv}``, the built-in default.
    An explicitly named file that is missing or malformed fails loudly.
    """
    titles_file = _resolve_path(titles_path, TITLES_ENV, TITLES_BASENAME, data_dir)
    keywords_file = _resolve_path(keywords_path, BANNED_KEYWORDS_ENV, BANNED_KEYWORDS_BASENAME, data_dir)

    titles = load_titles(titles_file) if titles_file else DEFAULT_EXISTING_TITLES
    keywords = load_banned_keywords(keywords_file) if keywords_file else DEFAULT_BANNED_KEYWORDS

    reference = ReferenceData.from_sequences(titles, keywords)
    logger.info(
        f"Reference data ready: {len(reference.titles)} titles, "
        f"{len(reference.banned_keywords)} banned keywords"
    )
    return reference
