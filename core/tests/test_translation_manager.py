from __future__ import annotations

from pathlib import Path

import pytest

from core.config.config_service import LABELS_TSV
from core.i18n.translation_manager import TranslationManager


@pytest.fixture
def labels(tmp_path: Path) -> Path:
    path = tmp_path / "labels.tsv"
    path.write_text(
        "label\ten\tzh-TW\n"
        "# comment row\n"
        "greet\tHello\t你好\n"
        "multi\tLine one\\nLine two\t\n"
        "only_en\tOnly English\t\n",
        encoding="utf-8",
    )
    return path


def test_lookup_in_active_language(labels):
    tm = TranslationManager(language="zh-TW")
    tm.load_file(labels)
    assert tm.t("greet") == "你好"
    assert tm.t("greet", lang="en") == "Hello"
    assert sorted(tm.available_languages()) == ["en", "zh-TW"]


def test_escaped_newline_becomes_line_break(labels):
    tm = TranslationManager()
    tm.load_file(labels)
    assert tm.t("multi") == "Line one\nLine two"


def test_falls_back_to_default_language_then_label(labels):
    tm = TranslationManager(language="zh-TW")
    tm.load_file(labels)
    assert tm.t("only_en") == "Only English"
    assert tm.t("unknown.key") == "unknown.key"
    assert ("unknown.key", "zh-TW") in tm._missing_keys_logged


def test_coverage(labels):
    tm = TranslationManager()
    tm.load_file(labels)
    assert tm.coverage["en"] == 1.0
    assert tm.coverage["zh-TW"] == pytest.approx(1 / 3)


def test_shipped_labels_cover_both_languages():
    tm = TranslationManager()
    tm.load_file(LABELS_TSV)
    assert {"en", "zh-TW"} <= set(tm.available_languages())
    assert tm.coverage["zh-TW"] == 1.0
    assert tm.t("letter.export.default_filename", lang="zh-TW") == "文件"


def test_language_tags_resolve_to_loaded_languages(labels):
    tm = TranslationManager()
    tm.load_file(labels)
    assert tm.resolve_language("zh") == "zh-TW"
    assert tm.resolve_language("en_US") == "en"
    assert tm.resolve_language("fr") == "en"
    tm.set_language("zh")
    assert tm.t("greet") == "你好"


def test_placeholders_are_filled(tmp_path):
    path = tmp_path / "labels.tsv"
    path.write_text("label\ten\nsaved\tSaved {path}\n", encoding="utf-8")
    tm = TranslationManager()
    tm.load_file(path)
    assert tm.t("saved", path="/tmp/a.pdf") == "Saved /tmp/a.pdf"
    assert tm.t("saved") == "Saved {path}"
