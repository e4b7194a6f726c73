"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

def _find_project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "core").is_dir() and (parent / "letter").is_dir():
            return parent
    return here.parent

PROJECT_ROOT = _find_project_root()
CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
LABELS_TSV = CONFIG_DIR.parent / "i18n" / "labels.tsv"

ENV_PREFIX = "LETTERPAD_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "Page": {
        "width": "794",
        "height": "1123",
        "padding": "60",
    },
    "Overlay": {
        "default_x": "400",
        "default_y": "700",
        "default_width": "150",
        "min_width": "50",
        "size_step": "10",
        "rotation_step": "90",
        "handle_radius_px": "9",
        "rotate_handle_offset": "28",
    },
    "Export": {
        "supersample": "2",
        "jpeg_quality": "95",
        "page_format": "A4",
        "output_dir": ".",
    },
    "Fonts": {
        "serif": "",
        "serif_bold": "",
        "sans": "",
    },
    "General": {
        "app_name": "Letterpad",
        "language": "en",
        "log_level": "INFO",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class PageConfig:
    width: float = 794.0
    height: float = 1123.0
    padding: float = 60.0


@dataclass
class OverlayConfig:
    default_x: float = 400.0
    default_y: float = 700.0
    default_width: float = 150.0
    min_width: float = 50.0
    size_step: float = 10.0
    rotation_step: float = 90.0
    handle_radius_px: float = 9.0
    rotate_handle_offset: float = 28.0


@dataclass
class ExportConfig:
    supersample: float = 2.0
    jpeg_quality: int = 95
    page_format: str = "A4"
    output_dir: Path = Path(".")


@dataclass
class FontsConfig:
    """Optional TrueType/OpenType files; empty means auto-detect."""
    serif: str = ""
    serif_bold: str = ""
    sans: str = ""


@dataclass
class GeneralConfig:
    app_name: str = "Letterpad"
    language: str = "en"
    log_level: str = "INFO"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    # dataclass annotations arrive as strings because of the __future__ import
    name = typ if isinstance(typ, str) else getattr(typ, "__name__", str(typ))
    if name == "Path":
        return Path(str(value)).expanduser()
    if name == "bool":
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if name == "int":
        return int(float(value))
    if name == "float":
        return float(value)
    return str(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays(environ: Mapping[str, str]) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path(environ: Mapping[str, str]) -> Path:
    if os.name == "nt":
        appdata = environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Letterpad" / "config.ini"
    return Path(environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "letterpad" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety.

    Layers, lowest precedence first: embedded defaults, ``defaults.ini``,
    ``LETTERPAD_<SECTION>__<KEY>`` environment variables, user ``config.ini``.
    Nothing is ever written back.
    """

    def __init__(
        self,
        *,
        defaults_ini: Optional[Path] = None,
        user_ini: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._lock = RLock()
        self._defaults_ini = defaults_ini if defaults_ini is not None else DEFAULTS_INI
        self._environ = environ if environ is not None else os.environ
        self._user_ini = user_ini if user_ini is not None else _user_config_path(self._environ)
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(self._defaults_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp), "defaults.ini", str(self._defaults_ini), sources)

            # Layer 2: environment variables
            env = _env_overlays(self._environ)
            _apply(merged, env, "env", "os.environ", sources)

            # Layer 3: user overrides
            if self._user_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(self._user_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp), "user", str(self._user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.page = _build_dataclass(PageConfig, merged.get("Page", {}))
            self.overlay = _build_dataclass(OverlayConfig, merged.get("Overlay", {}))
            self.export = _build_dataclass(ExportConfig, merged.get("Export", {}))
            self.fonts = _build_dataclass(FontsConfig, merged.get("Fonts", {}))
            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
