"""
Reference table loading.
- CSV columns are picked by header or as a lone column.
- Explicit path, environment and data directory are tried in order.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

import reference_data
from reference_data import (
    DEFAULT_BANNED_KEYWORDS,
    DEFAULT_EXISTING_TITLES,
    ReferenceData,
    default_reference_data,
    load_banned_keywords,
    load_reference_data,
    load_titles,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv(reference_data.TITLES_ENV, raising=False)
    monkeypatch.delenv(reference_data.BANNED_KEYWORDS_ENV, raising=False)


def test_default_tables():
    reference = default_reference_data()
    assert len(reference.titles) == 13
    assert reference.titles[0] == "The Times of India"
    assert "police" in reference.banned_keywords
    assert all(k == k.lower() for k in reference.banned_keywords)


def test_from_sequences_lowercases_keywords():
    reference = ReferenceData.from_sequences(["A Title"], ["Police", "CBI"])
    assert reference == ReferenceData(("A Title",), ("police", "cbi"))


def test_load_titles_from_csv(tmp_path):
    path = tmp_path / "titles.csv"
    path.write_text("Id,Title\n1,  Morning Star \n2,\n3,Evening Post\n", encoding="utf-8")
    assert load_titles(str(path)) == ["Morning Star", "Evening Post"]


def test_load_titles_single_column_any_header(tmp_path):
    path = tmp_path / "titles.csv"
    path.write_text("Name\nSakshi\nEenadu\n", encoding="utf-8")
    assert load_titles(str(path)) == ["Sakshi", "Eenadu"]


def test_load_banned_keywords_lowercases(tmp_path):
    path = tmp_path / "keywords.csv"
    path.write_text("Keyword,Reason\nPolice,authority\nSCAM,fraud\n", encoding="utf-8")
    assert load_banned_keywords(str(path)) == ["police", "scam"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_titles(str(tmp_path / "missing.csv"))


def test_ambiguous_columns_raise(tmp_path):
    path = tmp_path / "titles.csv"
    path.write_text("Name,Owner\nSakshi,Someone\n", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_titles(str(path))


def test_load_reference_data_falls_back_to_defaults(tmp_path):
    reference = load_reference_data(data_dir=str(tmp_path))
    assert reference.titles == DEFAULT_EXISTING_TITLES
    assert reference.banned_keywords == DEFAULT_BANNED_KEYWORDS


def test_load_reference_data_from_data_dir(tmp_path):
    (tmp_path / "EXISTING_TITLES.csv").write_text("title\nMorning Star\n", encoding="utf-8")
    reference = load_reference_data(data_dir=str(tmp_path))
    assert reference.titles == ("Morning Star",)
    assert reference.banned_keywords == DEFAULT_BANNED_KEYWORDS


def test_load_reference_data_env_overrides_data_dir(tmp_path, monkeypatch):
    (tmp_path / "EXISTING_TITLES.csv").write_text("title\nMorning Star\n", encoding="utf-8")
    env_titles = tmp_path / "other.csv"
    env_titles.write_text("title\nEvening Post\n", encoding="utf-8")
    keywords = tmp_path / "banned.csv"
    keywords.write_text("keyword\nStar\n", encoding="utf-8")
    monkeypatch.setenv(reference_data.TITLES_ENV, str(env_titles))
    monkeypatch.setenv(reference_data.BANNED_KEYWORDS_ENV, str(keywords))

    reference = load_reference_data(data_dir=str(tmp_path))
    assert reference.titles == ("Evening Post",)
    assert reference.banned_keywords == ("star",)


def test_load_reference_data_explicit_path_wins(tmp_path, monkeypatch):
    env_titles = tmp_path / "env.csv"
    env_titles.write_text("title\nEvening Post\n", encoding="utf-8")
    explicit = tmp_path / "explicit.csv"
    explicit.write_text("title\nNoon Gazette\n", encoding="utf-8")
    monkeypatch.setenv(reference_data.TITLES_ENV, str(env_titles))

    reference = load_reference_data(titles_path=str(explicit), data_dir=str(tmp_path))
    assert reference.titles == ("Noon Gazette",)


def test_load_reference_data_missing_env_file_fails_loudly(tmp_path, monkeypatch):
    monkeypatch.setenv(reference_data.TITLES_ENV, str(tmp_path / "nope.csv"))
    with pytest.raises(FileNotFoundError):
        load_reference_data(data_dir=str(tmp_path))
