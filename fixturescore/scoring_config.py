"""
Scoring profile loader.

A scoring profile holds every weight, window and market label the engine
uses. Profiles live in ``fixturescore/profiles/<profile_id>.yaml`` and are
shipped as package data; a host can point ``FIXTURESCORE_PROFILES_DIR`` at
its own directory to override them.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from fixturescore.config import config


class ScoringConfigError(ValueError):
    pass


def _load_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ScoringConfigError(f"Scoring profile must be a mapping at top-level: {path}")
        return data
    except FileNotFoundError as e:
        raise ScoringConfigError(f"Scoring profile not found: {path}") from e
    except yaml.YAMLError as e:
        raise ScoringConfigError(f"Failed to parse YAML: {path}: {e}") from e


def _require(d: Dict[str, Any], key: str, ctx: str) -> Any:
    if key not in d:
        raise ScoringConfigError(f"Missing required key '{key}' in {ctx}")
    return d[key]


def _as_str(x: Any, ctx: str) -> str:
    if not isinstance(x, str) or not x.strip():
        raise ScoringConfigError(f"Expected non-empty string for {ctx}")
    return x


def _as_dict(x: Any, ctx: str) -> Dict[str, Any]:
    if not isinstance(x, dict):
        raise ScoringConfigError(f"Expected mapping for {ctx}")
    return x


def _as_float(x: Any, ctx: str) -> float:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise ScoringConfigError(f"Expected number for {ctx}")
    return float(x)


def _as_int(x: Any, ctx: str) -> int:
    if isinstance(x, bool) or not isinstance(x, int) or x < 0:
        raise ScoringConfigError(f"Expected non-negative integer for {ctx}")
    return x


_PROFILES_DIR = os.path.join(os.path.dirname(__file__), "profiles")


@dataclass(frozen=True)
class Windows:
    form_length: int = 5
    form_wins: int = 5
    goals_window: int = 5
    defense_window: int = 10
    recent_h2h: int = 3


@dataclass(frozen=True)
class ConfidenceWeights:
    odds: float = 0.4
    head_to_head: float = 0.2
    form: float = 0.3
    position: float = 0.1
    neutral_odds_ratio: float = 0.5
    head_to_head_scale: float = 25.0
    form_scale: float = 5.0
    position_scale: float = 3.0
    position_cap: float = 20.0


@dataclass(frozen=True)
class ExpectedGoalsWeights:
    over_25_base: float = 2.5
    over_25_slope: float = 1.5
    over_25_weight: float = 0.6
    over_15_base: float = 1.5
    over_15_slope: float = 1.5
    over_15_weight: float = 0.4
    min_odds_weight: float = 0.5


@dataclass(frozen=True)
class DefenseWeights:
    clean_sheet_factor: float = 0.2


@dataclass(frozen=True)
class MarketSpec:
    """Exact market name + specifier, and the outcome labels to read from it."""
    name: str
    specifier: str
    outcomes: Dict[str, str]


@dataclass(frozen=True)
class ReasonThresholds:
    max_reasons: int = 5
    high_scoring: float = 2.5
    moderate_scoring: float = 1.5
    strong_favorite_ratio: float = 0.5
    moderate_favorite_ratio: float = 0.7
    home_clean_sheets: int = 2
    away_clean_sheets: int = 1
    position_gap: int = 5


def _build(cls, section: Dict[str, Any], ctx: str, *, ints=()):
    """Instantiate a frozen settings dataclass, validating each present key."""
    kwargs = {}
    for name in cls.__dataclass_fields__:
        if name not in section:
            continue
        key_ctx = f"{ctx}.{name}"
        kwargs[name] = _as_int(section[name], key_ctx) if name in ints else _as_float(section[name], key_ctx)
    unknown = set(section) - set(cls.__dataclass_fields__)
    if unknown:
        raise ScoringConfigError(f"Unknown keys in {ctx}: {', '.join(sorted(unknown))}")
    return cls(**kwargs)


@dataclass(frozen=True)
class ScoringConfig:
    """
    Scoring profile loaded from a YAML file.

    Sections missing from the file fall back to the reference weights, so a
    profile only needs to list what it changes.
    """
    raw: Dict[str, Any]
    config_path: str

    # --- Meta ---

    @property
    def profile_id(self) -> str:
        meta = _as_dict(_require(self.raw, "meta", self.config_path), "meta")
        return _as_str(_require(meta, "profile_id", self.config_path), "meta.profile_id")

    @property
    def display_name(self) -> str:
        meta = self.raw.get("meta") or {}
        return meta.get("display_name", self.profile_id)

    # --- Sections ---

    def _section(self, key: str) -> Dict[str, Any]:
        return _as_dict(self.raw.get(key) or {}, key)

    @property
    def windows(self) -> Windows:
        return _build(Windows, self._section("windows"), "windows",
                      ints=Windows.__dataclass_fields__.keys())

    @property
    def confidence_weights(self) -> ConfidenceWeights:
        return _build(ConfidenceWeights, self._section("confidence"), "confidence")

    @property
    def expected_goals(self) -> ExpectedGoalsWeights:
        return _build(ExpectedGoalsWeights, self._section("expected_goals"), "expected_goals")

    @property
    def defense(self) -> DefenseWeights:
        return _build(DefenseWeights, self._section("defense"), "defense")

    @property
    def clean_sheet_factor(self) -> float:
        return self.defense.clean_sheet_factor

    @property
    def reasons(self) -> ReasonThresholds:
        return _build(ReasonThresholds, self._section("reasons"), "reasons",
                      ints=("max_reasons", "home_clean_sheets", "away_clean_sheets", "position_gap"))

    @property
    def markets(self) -> Dict[str, MarketSpec]:
        """Market specs keyed by role: match_result, over_under_15, over_under_25, btts."""
        section = self._section("markets")
        specs = dict(DEFAULT_MARKETS)
        for role, cfg in section.items():
            ctx = f"markets.{role}"
            cfg = _as_dict(cfg, ctx)
            name = _as_str(_require(cfg, "name", ctx), f"{ctx}.name")
            specifier = cfg.get("specifier") or ""
            outcomes = {
                str(k): _as_str(v, f"{ctx}.{k}")
                for k, v in cfg.items() if k not in ("name", "specifier")
            }
            specs[role] = MarketSpec(name=name, specifier=str(specifier), outcomes=outcomes)
        return specs


DEFAULT_MARKETS: Dict[str, MarketSpec] = {
    "match_result": MarketSpec("1X2", "", {"home": "Home", "draw": "Draw", "away": "Away"}),
    "over_under_15": MarketSpec("Over/Under", "total=1.5", {"over": "Over 1.5", "under": "Under 1.5"}),
    "over_under_25": MarketSpec("Over/Under", "total=2.5", {"over": "Over 2.5", "under": "Under 2.5"}),
    "btts": MarketSpec("Both Teams To Score", "", {"yes": "Yes", "no": "No"}),
}


# --- Loader infrastructure ---

_CACHE: Dict[str, ScoringConfig] = {}
_CACHE_LOCK = threading.Lock()


def load_scoring_config(
    profile_id: Optional[str] = None,
    profiles_dir: Optional[str] = None,
    *,
    use_cache: bool = True,
) -> ScoringConfig:
    """
    Load a scoring profile from YAML.

    Args:
        profile_id: Profile identifier (default: ``FIXTURESCORE_PROFILE``)
        profiles_dir: Directory containing profile YAML files
            (default: ``FIXTURESCORE_PROFILES_DIR`` or the built-in profiles)
        use_cache: Whether to cache loaded profiles

    Returns:
        ScoringConfig instance
    """
    profile_id = (profile_id or config.get("FIXTURESCORE_PROFILE") or "").strip().lower()
    if not profile_id:
        raise ScoringConfigError("profile_id must be a non-empty string")

    if profiles_dir is None:
        profiles_dir = config.get("FIXTURESCORE_PROFILES_DIR") or _PROFILES_DIR

    cache_key = f"{profiles_dir}:{profile_id}"

    with _CACHE_LOCK:
        if use_cache and cache_key in _CACHE:
            return _CACHE[cache_key]

    path = os.path.join(profiles_dir, f"{profile_id}.yaml")
    raw = _load_yaml(path)
    cfg = ScoringConfig(raw=raw, config_path=path)

    # Trigger validation
    _ = cfg.profile_id
    _ = cfg.windows
    _ = cfg.confidence_weights
    _ = cfg.expected_goals
    _ = cfg.defense
    _ = cfg.reasons
    _ = cfg.markets

    if use_cache:
        with _CACHE_LOCK:
            _CACHE[cache_key] = cfg
    return cfg


def get_default_scoring_config() -> ScoringConfig:
    """Load the built-in reference profile."""
    return load_scoring_config("default", profiles_dir=_PROFILES_DIR)
