"""
Configuration loading for tunable heuristics.

Packaged defaults live in cvmiracle/config/*.yaml. A directory of overrides
can be supplied through CVMIRACLE_CONFIG_DIR; any file there with the same
name is merged over the packaged default with OmegaConf.

Examples:
    >>> load_config("page_fit")["budgets"]["Minimal ATS"]
    98

    >>> load_config("page_fit", overrides={"unit_cost": {"chars_per_unit": 90}})["unit_cost"]["chars_per_unit"]
    90
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


@lru_cache(maxsize=None)
def _load_merged(name: str, override_dir: str, extra_path: str) -> DictConfig:
    config_path = DEFAULT_CONFIG_DIR / f"{name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config '{name}' not found at {config_path}")

    layers = [OmegaConf.load(config_path)]

    if override_dir:
        override_path = Path(override_dir) / f"{name}.yaml"
        if override_path.exists():
            layers.append(OmegaConf.load(override_path))

    if extra_path:
        layers.append(OmegaConf.load(Path(extra_path)))

    return OmegaConf.merge(*layers)


def load_config(name: str, overrides: Dict[str, Any] = None, extra_path: Path = None) -> Dict[str, Any]:
    """
    Load a named config as a plain dict.

    Merge order (later wins): packaged default, CVMIRACLE_CONFIG_DIR/{name}.yaml,
    extra_path, overrides.

    Args:
        name: Config name without extension (e.g., "page_fit")
        overrides: Optional nested dict merged last
        extra_path: Optional YAML file merged after the override directory

    Returns:
        Resolved config as a fresh dict (safe to mutate)

    Raises:
        FileNotFoundError: If no packaged default exists for name
    """
    merged = _load_merged(
        name,
        os.getenv("CVMIRACLE_CONFIG_DIR", ""),
        str(extra_path) if extra_path else "",
    )
    if overrides:
        merged = OmegaConf.merge(merged, OmegaConf.create(overrides))
    return OmegaConf.to_container(merged, resolve=True)


def clear_config_cache() -> None:
    """Forget loaded configs (used when override files change)."""
    _load_merged.cache_clear()
    load_word_list.cache_clear()


@lru_cache(maxsize=None)
def load_word_list(name: str, key: str) -> Tuple[str, ...]:
    """
    Load a list from a config once, as a hashable tuple.

    Pattern builders key their compiled-regex caches on this tuple, so
    clear_config_cache() invalidates them too.

    Example:
        >>> "Paris" in load_word_list("gazetteers", "locations")
        True
    """
    return tuple(load_config(name)[key])
