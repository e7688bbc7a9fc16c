# vscroll/config.py
from __future__ import annotations
import importlib
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration field is unknown or holds an invalid value."""


# Attribute names used by the list/table widgets, mapped to field names.
CAMEL_ALIASES = {
    "itemHeight": "item_size",
    "itemSize": "item_size",
    "containerHeight": "container_height",
    "containerWidth": "container_width",
    "bufferSize": "buffer_size",
    "rowHeight": "row_height",
    "columnWidth": "column_width",
    "fixedRowsTop": "fixed_rows_top",
    "fixedRowsBottom": "fixed_rows_bottom",
    "fixedColumnsLeft": "fixed_columns_left",
    "fixedColumnsRight": "fixed_columns_right",
}


class _ScrollConfig:
    """
    Mutable set of numeric fields shared by the 1D and 2D configurations.

    Subclasses declare `DEFAULTS` (field -> default) and `POSITIVE` (fields that
    must be strictly greater than zero). Every other field must be >= 0.
    """
    DEFAULTS: Dict[str, float] = {}
    POSITIVE: frozenset = frozenset()
    SECTION = ""

    def __init__(self, **fields: Any):
        for name, default in self.DEFAULTS.items():
            object.__setattr__(self, name, default)
        self.update(**fields)

    def __setattr__(self, name, value):
        self.update(**{name: value})

    def update(self, **partial: Any) -> None:
        """
        Merges the given fields into this configuration.

        Fields are validated before any of them is applied, so a failed update
        leaves the configuration untouched.
        """
        staged = {}
        for raw_name, value in partial.items():
            name = CAMEL_ALIASES.get(raw_name, raw_name)
            if name not in self.DEFAULTS:
                raise ConfigError(f"Unknown {type(self).__name__} field: {raw_name!r}")
            staged[name] = self._validate(name, value)
        for name, value in staged.items():
            object.__setattr__(self, name, value)

    def _validate(self, name: str, value: Any):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be finite, got {value!r}")
        if name in self.POSITIVE:
            if not value > 0:
                raise ConfigError(f"{name} must be greater than 0, got {value!r}")
        elif value < 0:
            raise ConfigError(f"{name} must not be negative, got {value!r}")
        if name in _COUNT_FIELDS:
            # Counts are index units.
            if value != int(value):
                raise ConfigError(f"{name} must be a whole number, got {value!r}")
            value = int(value)
        return value

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.DEFAULTS}

    def copy(self):
        return type(self)(**self.as_dict())

    @classmethod
    def from_config(cls, config: Optional["Config"] = None, **overrides: Any):
        """
        Builds a configuration from the matching section of a loaded `Config`
        (e.g. the `window:` block of vscroll.yaml), then applies `overrides`.
        """
        config = config if config is not None else get_config()
        section = config.get(cls.SECTION) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Config section {cls.SECTION!r} must be a mapping, got {type(section).__name__}")
        merged = dict(section)
        merged.update(overrides)
        return cls(**merged)

    def __eq__(self, other):
        return type(other) is type(self) and other.as_dict() == self.as_dict()

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"{type(self).__name__}({fields})"


_COUNT_FIELDS = frozenset({
    "buffer_size",
    "overscan",
    "fixed_rows_top",
    "fixed_rows_bottom",
    "fixed_columns_left",
    "fixed_columns_right",
})


class WindowConfig(_ScrollConfig):
    """
    Configuration of a one-dimensional window.

    :param item_size: Default item height (px), used for unmeasured items.
    :param container_height: Visible height of the scroll container (px).
    :param buffer_size: Extra items kept on each side of the visible window.
    :param overscan: Additional smaller pad beyond the buffer.
    """
    DEFAULTS = {
        "item_size": 50,
        "container_height": 300,
        "buffer_size": 5,
        "overscan": 2,
    }
    POSITIVE = frozenset({"item_size"})
    SECTION = "window"


class GridConfig(_ScrollConfig):
    """
    Configuration of a two-dimensional window, including the counts of rows
    and columns pinned outside virtualization.
    """
    DEFAULTS = {
        "row_height": 50,
        "column_width": 120,
        "container_height": 300,
        "container_width": 800,
        "buffer_size": 5,
        "overscan": 2,
        "fixed_rows_top": 0,
        "fixed_rows_bottom": 0,
        "fixed_columns_left": 0,
        "fixed_columns_right": 0,
    }
    POSITIVE = frozenset({"row_height", "column_width"})
    SECTION = "grid"


class Config:
    """
    Config loader that supports:
      - an embedded config module (default name: _embedded_config, attribute: CONFIG)
      - a YAML file (default: vscroll.yaml)

    Usage:
        cfg = Config("vscroll.yaml")
        buffer = cfg.get_nested("window.buffer_size", 5)
        window = WindowConfig.from_config(cfg)

    Parameters:
      config_file: path to the YAML file, absolute or relative to the cwd.
      prefer_embedded: when True (default) try the embedded module first, otherwise the file first.
      embedded_module_name: module to import when looking for embedded config.
    """

    def __init__(
        self,
        config_file: Optional[str] = "vscroll.yaml",
        prefer_embedded: bool = True,
        embedded_module_name: str = "_embedded_config",
    ):
        self.config_file_arg = config_file
        self.prefer_embedded = bool(prefer_embedded)
        self.embedded_module_name = embedded_module_name

        self._config: Dict[str, Any] = {}
        self._source: Optional[str] = None  # 'embedded' or 'file' or None
        self._resolved_config_path: Optional[Path] = self._resolve_config_path(config_file)

        self.reload()

    # ----- public API -----
    def reload(self, prefer_embedded: Optional[bool] = None) -> None:
        """
        Reload the configuration. If prefer_embedded is provided, it overrides the instance preference
        just for this reload.
        """
        prefer = self.prefer_embedded if prefer_embedded is None else bool(prefer_embedded)

        if prefer:
            loaded = self._try_load_embedded() or self._try_load_file()
        else:
            loaded = self._try_load_file() or self._try_load_embedded()

        if not loaded:
            self._source = None
            self._config = {}

    def as_dict(self) -> Dict[str, Any]:
        """Return the loaded configuration as a dict (may be empty)."""
        return dict(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """Shallow lookup in the top-level config dict."""
        return self._config.get(key, default)

    def get_nested(self, path: str, default: Any = None, sep: str = ".") -> Any:
        """
        Lookup nested keys using dot-path (e.g. "grid.fixed_rows_top").
        Returns default if any step is missing.
        """
        if not path:
            return default
        cur = self._config
        for part in path.split(sep):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur

    @property
    def source(self) -> Optional[str]:
        """Return 'embedded'|'file'|None depending on where config came from."""
        return self._source

    @property
    def resolved_config_path(self) -> Optional[Path]:
        return self._resolved_config_path

    # ----- internal helpers -----
    @staticmethod
    def _resolve_config_path(config_file: Optional[str]) -> Optional[Path]:
        if not config_file:
            return None
        candidate = Path(config_file)
        if not candidate.is_absolute():
            candidate = Path.cwd() / candidate
        return candidate.resolve() if candidate.exists() else None

    def _try_load_embedded(self) -> bool:
        try:
            module = importlib.import_module(self.embedded_module_name)
        except ModuleNotFoundError:
            return False
        cfg = getattr(module, "CONFIG", None)
        if not isinstance(cfg, dict):
            logger.warning("Embedded config module %s has no CONFIG dict", self.embedded_module_name)
            return False
        self._config = dict(cfg)
        self._source = "embedded"
        return True

    def _try_load_file(self) -> bool:
        if not self._resolved_config_path:
            return False
        try:
            with self._resolved_config_path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not load config file %s: %s", self._resolved_config_path, exc)
            return False
        if data is None:
            data = {}
        if not isinstance(data, dict):
            logger.warning("Config file %s does not hold a mapping; ignoring it", self._resolved_config_path)
            return False
        self._config = data
        self._source = "file"
        logger.debug("Loaded config from %s", self._resolved_config_path)
        return True

    def __repr__(self):
        return f"Config(source={self._source!r}, keys={list(self._config.keys())})"


_shared: Optional[Config] = None


def get_config(*args, **kwargs) -> Config:
    """
    Returns the shared Config instance, creating it on first use.
    Arguments are forwarded to Config() only on the first call.
    """
    global _shared
    if _shared is None:
        _shared = Config(*args, **kwargs)
    return _shared
