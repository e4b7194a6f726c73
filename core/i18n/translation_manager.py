import csv
from pathlib import Path
from typing import Iterable

from core.app_logging.logic.logger import logger

LOCALE_TRACK_MISSING_KEYS = True


def _read_tsv(path: Path) -> tuple[list[str], list[list[str]]]:
    """Header languages and data rows of one labels.tsv (``#`` rows skipped)."""
    with open(path, encoding="utf-8", newline="") as fh:
        rows = list(csv.reader(fh, delimiter="\t"))
    if not rows:
        return [], []
    data = [r for r in rows[1:] if r and r[0] and not r[0].startswith("#")]
    return rows[0][1:], data


class TranslationManager:
    """
    Übersetzungen aus einer oder mehreren labels.tsv Dateien.

    Spalte 1 ist der Label-Key, jede weitere Spalte eine Sprache (Header-Zeile).
    Spätere Dateien überschreiben frühere Einträge, so können Feature-Dateien
    zentrale Texte ersetzen. ``\\n`` im Text steht für einen Zeilenumbruch.
    """

    def __init__(self, language: str = "en", fallback_language: str = "en"):
        self.translations: dict[str, dict[str, str]] = {}
        self.coverage: dict[str, float] = {}
        self.language = language
        self.fallback_language = fallback_language
        self._missing_keys_logged: set[tuple[str, str]] = set()

    # ------------------------------------------------------------------ load
    def load_files(self, file_paths: Iterable[Path]) -> None:
        merged: dict[str, dict[str, str]] = {}
        labels: set[str] = set()
        for path in file_paths:
            langs, rows = _read_tsv(Path(path))
            for lang in langs:
                merged.setdefault(lang, {})
            for row in rows:
                labels.add(row[0])
                for col, lang in enumerate(langs, start=1):
                    cell = row[col] if col < len(row) else ""
                    if cell:
                        merged[lang][row[0]] = cell.replace("\\n", "\n")
        self.translations = merged
        self.coverage = {
            lang: (len(texts) / len(labels) if labels else 1.0) for lang, texts in merged.items()
        }
        self._missing_keys_logged.clear()

    def load_file(self, file_path: Path) -> None:
        self.load_files([file_path])

    def available_languages(self) -> list[str]:
        return list(self.translations)

    # ------------------------------------------------------------------ language
    def resolve_language(self, language: str) -> str:
        """
        Best loaded match for a language tag: exact, then same primary
        subtag (``zh`` → ``zh-TW``, ``en-US`` → ``en``), else the fallback.
        """
        if language in self.translations:
            return language
        primary = language.replace("_", "-").split("-")[0].lower()
        for lang in self.translations:
            if lang.split("-")[0].lower() == primary:
                return lang
        return self.fallback_language

    def set_language(self, language: str) -> None:
        self.language = self.resolve_language(language) if self.translations else language

    # ------------------------------------------------------------------ lookup
    def t(self, label: str, lang: str | None = None, **fmt) -> str:
        """
        Text in ``lang`` (default: active language), else fallback language,
        else the label itself. Keyword arguments fill ``{placeholders}``.
        Missing keys are logged once per language.
        """
        lang = lang or self.language
        text = self.translations.get(lang, {}).get(label)
        if text is None:
            if LOCALE_TRACK_MISSING_KEYS and (label, lang) not in self._missing_keys_logged:
                self._missing_keys_logged.add((label, lang))
                logger.log("Locale", "MissingKey", level="DEBUG",
                           message=f"'{label}' has no text for {lang}")
            text = self.translations.get(self.fallback_language, {}).get(label, label)
        return text.format(**fmt) if fmt else text


# Globale Instanz
translations = TranslationManager()


def T(label: str, **fmt) -> str:
    """Übersetzung in der aktiven Sprache."""
    return translations.t(label, **fmt)
