"""Configuration for the analysis space."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, TypeVar
import logging
import os

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "ANALYSIS_SPACE_"

T = TypeVar('T')


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


# =============================================================================
# SETTINGS SECTIONS
# =============================================================================

@dataclass(frozen=True)
class ViewportSettings:
    """Pan/zoom limits and virtualization margins."""
    min_scale: float = 0.1
    max_scale: float = 3.0
    zoom_in_factor: float = 1.1
    zoom_out_factor: float = 0.9
    cull_margin: float = 100.0
    click_tolerance: float = 3.0
    edge_hit_tolerance: float = 4.0
    min_node_size: float = 20.0
    max_node_size: float = 60.0
    default_x: float = 400.0
    default_y: float = 300.0
    default_scale: float = 0.5
    container_width: float = 4800.0
    container_height: float = 3600.0

    def __post_init__(self):
        if not 0 < self.min_scale <= self.max_scale:
            raise ConfigError(
                f"Invalid scale bounds [{self.min_scale}, {self.max_scale}]"
            )
        if self.cull_margin < 0:
            raise ConfigError("cull_margin must be non-negative")


@dataclass(frozen=True)
class LayoutSettings:
    """Fallback placement for cards without coordinates."""
    extent: float = 1000.0
    seed: Optional[int] = None


@dataclass(frozen=True)
class ClusteringSettings:
    """Defaults and constants for the clustering engine."""
    min_cluster_size: int = 3
    cluster_threshold: float = 0.5
    distance_scale: float = 100.0  # cluster_threshold -> world units
    kmeans_iterations: int = 10
    kmeans_nodes_per_cluster: int = 10
    kmeans_min_k: int = 2
    seed: Optional[int] = None


@dataclass(frozen=True)
class PanelSettings:
    """Side-panel phase timing."""
    settle_delay_seconds: float = 0.1


@dataclass(frozen=True)
class AnalysisSpaceConfig:
    """Top-level configuration, one section per layer."""
    viewport: ViewportSettings = field(default_factory=ViewportSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    clustering: ClusteringSettings = field(default_factory=ClusteringSettings)
    panels: PanelSettings = field(default_factory=PanelSettings)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AnalysisSpaceConfig':
        """
        Build a configuration from ANALYSIS_SPACE_* environment variables.

        Unset variables keep their defaults. Malformed values raise ConfigError.
        """
        env = os.environ if environ is None else environ
        seed = _read(env, "SEED", int)

        viewport_defaults = ViewportSettings()
        viewport = ViewportSettings(
            min_scale=_read(env, "MIN_SCALE", float, viewport_defaults.min_scale),
            max_scale=_read(env, "MAX_SCALE", float, viewport_defaults.max_scale),
            cull_margin=_read(env, "CULL_MARGIN", float, viewport_defaults.cull_margin),
        )

        clustering_defaults = ClusteringSettings()
        clustering = ClusteringSettings(
            min_cluster_size=_read(
                env, "MIN_CLUSTER_SIZE", int, clustering_defaults.min_cluster_size
            ),
            cluster_threshold=_read(
                env, "CLUSTER_THRESHOLD", float, clustering_defaults.cluster_threshold
            ),
            seed=seed,
        )

        settle_ms = _read(env, "PANEL_SETTLE_MS", float)
        panels = PanelSettings(
            settle_delay_seconds=(
                settle_ms / 1000.0 if settle_ms is not None
                else PanelSettings().settle_delay_seconds
            )
        )
        if panels.settle_delay_seconds < 0:
            raise ConfigError("PANEL_SETTLE_MS must be non-negative")

        log_level = env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown log level: {log_level}")

        return cls(
            viewport=viewport,
            layout=LayoutSettings(seed=seed),
            clustering=clustering,
            panels=panels,
            log_level=log_level,
        )


def _read(
    env: Mapping[str, str],
    name: str,
    parse: Callable[[str], T],
    default: Optional[T] = None,
) -> Optional[T]:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {ENV_PREFIX}{name}: {raw!r}") from exc


def configure_logging(level: str = "WARNING") -> None:
    """Attach a basic handler to the package logger."""
    logger = logging.getLogger("analysis_space")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
    LOGGER.debug("Logging configured at %s", level)
