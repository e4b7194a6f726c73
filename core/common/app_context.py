# core/common/app_context.py
"""
Global runtime context for Letterpad.

IMPORTANT ARCHITECTURE RULE:
- ConfigService is the SINGLE source of truth for configuration.
- AppContext only wires shared infrastructure (config, logger, translations).
  Document content, overlay geometry and the display scale are session state
  and live in explicit state objects (see letter.logic.session_state), never here.
"""

from __future__ import annotations

from pathlib import Path

from core.app_logging.logic.logger import Logger, configure_logging, logger
from core.config.config_service import LABELS_TSV, PROJECT_ROOT, ConfigService, config_service
from core.i18n.translation_manager import T, TranslationManager, translations


def _label_files(root: Path) -> list[Path]:
    """Central labels.tsv first, then feature-local ones, de-duplicated."""
    seen: set[Path] = set()
    files: list[Path] = []
    for p in [LABELS_TSV, *sorted(root.glob("*/i18n/labels.tsv"))]:
        rp = p.resolve()
        if rp.exists() and rp not in seen:
            seen.add(rp)
            files.append(rp)
    return files


class AppContext:
    """Central runtime context (no GUI state, no session state)."""

    config: ConfigService = config_service
    logger: Logger = logger
    translations: TranslationManager = translations
    T = staticmethod(T)

    _bootstrapped = False

    @classmethod
    def bootstrap(cls) -> None:
        """Configure logging and load translations once per process."""
        if cls._bootstrapped:
            return
        configure_logging(cls.config.general.log_level)

        files = _label_files(PROJECT_ROOT)
        if files:
            cls.translations.load_files(files)
        else:
            # Empty init to avoid KeyErrors later
            cls.translations.translations = {"en": {}}
        cls.translations.set_language(cls.config.general.language)

        cls._bootstrapped = True
        cls.logger.log(
            "AppContext",
            "Bootstrap",
            message=f"language={cls.config.general.language}, labels={len(files)}",
        )
