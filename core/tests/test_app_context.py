"""
core/tests/test_app_context.py

Bootstrap wiring of the AppContext: logging, translations, session log.
"""

from __future__ import annotations

import logging

from core.app_logging.logic.logger import logger
from core.common.app_context import AppContext, _label_files
from core.config.config_service import LABELS_TSV, PROJECT_ROOT


def test_central_labels_come_first():
    files = _label_files(PROJECT_ROOT)
    assert files[0] == LABELS_TSV.resolve()
    assert len(files) == len(set(files))


def test_bootstrap_loads_labels_once(monkeypatch):
    monkeypatch.setattr(AppContext, "_bootstrapped", False)
    logger.clear()
    root_handlers = list(logging.getLogger().handlers)
    try:
        AppContext.bootstrap()
        AppContext.bootstrap()

        assert "zh-TW" in AppContext.translations.available_languages()
        assert AppContext.translations.language == AppContext.translations.resolve_language(
            AppContext.config.general.language)
        assert AppContext.translations.t("letter.export.default_filename", lang="en") == "document"
        assert len(logger.query_logs(feature="AppContext", event="Bootstrap")) == 1
    finally:
        root = logging.getLogger()
        for h in list(root.handlers):
            if h not in root_handlers:
                root.removeHandler(h)
