"""
DecoderCore Configuration Management
=====================================

Centralized configuration for the decoder toolkit using Python
dataclasses and TOML-based persistence.

Architecture follows the Twelve-Factor App methodology for configuration
management (Wiggins, 2011), separating config from code.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - PEP 681 -- Data Class Transforms (2022).
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Tool-Specific Configs ==========================


@dataclass(frozen=False, slots=True)
class NumberTheoryConfig:
    """Configuration for the number-theory classifier.

    The search limits bound the outward neighbor scans; a scan that runs
    past its limit reports ``None`` instead of continuing.

    ``prime_index_method`` selects how the index of a prime is counted:
    ``"trial"`` tests every integer up to *n* by trial division (O(n)
    primality tests), ``"sieve"`` counts with a NumPy sieve and returns
    the same value.
    """

    prime_search_limit: int = 1000
    triangular_search_limit: int = 1000
    fibonacci_search_limit: int = 1000
    palindrome_search_limit: int = 2000
    prime_index_method: str = "trial"


@dataclass(frozen=False, slots=True)
class ChronologyConfig:
    """Configuration for the chronology matcher.

    Controls how the "next astronomical event" entity is recognised
    among the caller-supplied chronologies.
    """

    astronomical_entity_type: str = "Astronomical"
    astronomical_keywords: list[str] = field(
        default_factory=lambda: ["Eclipse", "Moon"]
    )


@dataclass(frozen=False, slots=True)
class MatchIndexConfig:
    """Configuration for the match-database index loader.

    ``assumed_content_length`` is used for download progress when the
    server omits ``Content-Length``.
    """

    source_url: str = (
        "https://docs.google.com/spreadsheets/d/"
        "1OMCA16fEZJqic6JoZKFBhYy3wnB0Rr346VdwQYw_gzM/export?format=csv"
    )
    request_timeout: float = 60.0
    max_retries: int = 2
    chunk_size: int = 65_536
    assumed_content_length: int = 50_000_000
    progress_interval_rows: int = 50_000
    user_agent: str = "DecoderCore/1.0"


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings shared across all decoder modules.

    Controls logging verbosity and destination. ``debug`` forces
    DEBUG-level logging regardless of ``log_level``.
    """

    log_level: str = "WARNING"
    log_file: str = ""
    log_json: bool = False
    debug: bool = False


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class DecoderConfig:
    """Master configuration aggregating all tool-specific and global settings.

    Usage:
        >>> config = DecoderConfig.load()                  # from default path
        >>> config = DecoderConfig.load("custom.toml")     # from custom path
        >>> print(config.number_theory.prime_search_limit)
        1000
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    number_theory: NumberTheoryConfig = field(default_factory=NumberTheoryConfig)
    chronology: ChronologyConfig = field(default_factory=ChronologyConfig)
    match_index: MatchIndexConfig = field(default_factory=MatchIndexConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> DecoderConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults -- no ``KeyError`` is raised.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`DecoderConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            number_theory=cls._build_section(
                NumberTheoryConfig, raw.get("number_theory", {})
            ),
            chronology=cls._build_section(ChronologyConfig, raw.get("chronology", {})),
            match_index=cls._build_section(MatchIndexConfig, raw.get("match_index", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> DecoderConfig:
    """Module-level convenience wrapper around :meth:`DecoderConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = DecoderConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
