"""Resolver configuration helpers."""

import codecs
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .constants import (
    CONFIG_FILE,
    ENV_ENCODING,
    ENV_HEAD_DECODING,
    ENV_WORKDIR_DECODING,
    WORKDIFF_DIR,
)
from .core import DecodeMode
from .errors import ConfigError


@dataclass(frozen=True)
class ResolverConfig:
    """Configuration controlling how snapshot content is decoded."""

    head_decoding: DecodeMode = DecodeMode.REPLACE
    workdir_decoding: DecodeMode = DecodeMode.STRICT
    encoding: str = "utf-8"

    def __post_init__(self):
        object.__setattr__(self, "head_decoding", _decode_mode(self.head_decoding, "head_decoding"))
        object.__setattr__(self, "workdir_decoding", _decode_mode(self.workdir_decoding, "workdir_decoding"))
        try:
            codecs.lookup(self.encoding)
        except (LookupError, TypeError) as e:
            raise ConfigError(f"Unknown encoding '{self.encoding}'") from e


def _decode_mode(value, field_name: str) -> DecodeMode:
    if isinstance(value, DecodeMode):
        return value
    try:
        return DecodeMode(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in DecodeMode)
        raise ConfigError(f"{field_name} must be one of: {allowed} (got {value!r})")


def config_path(root: Path) -> Path:
    """Get path to the project's config file."""
    return Path(root) / WORKDIFF_DIR / CONFIG_FILE


def load_resolver_config(
    root: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ResolverConfig:
    """Load resolver configuration.

    Defaults are overridden by .workdiff/config.yaml under root (if present),
    which is in turn overridden by WORKDIFF_* environment variables.

    Args:
        root: Project directory to look for .workdiff/config.yaml in
        environ: Environment mapping (defaults to os.environ)

    Returns:
        ResolverConfig

    Raises:
        ConfigError: If a configured value is invalid
    """
    config = ResolverConfig()
    environ = os.environ if environ is None else environ

    if root is not None:
        cfg_path = config_path(root)
        if cfg_path.is_file():
            try:
                data = yaml.safe_load(cfg_path.read_text()) or {}
            except (OSError, yaml.YAMLError):
                data = {}
            if isinstance(data, dict):
                decoding = data.get("decoding", data)
                if isinstance(decoding, dict):
                    config = replace(
                        config,
                        head_decoding=decoding.get("head", config.head_decoding),
                        workdir_decoding=decoding.get("workdir", config.workdir_decoding),
                        encoding=decoding.get("encoding", config.encoding),
                    )

    overrides = {}
    if environ.get(ENV_HEAD_DECODING):
        overrides["head_decoding"] = environ[ENV_HEAD_DECODING]
    if environ.get(ENV_WORKDIR_DECODING):
        overrides["workdir_decoding"] = environ[ENV_WORKDIR_DECODING]
    if environ.get(ENV_ENCODING):
        overrides["encoding"] = environ[ENV_ENCODING]
    if overrides:
        config = replace(config, **overrides)

    return config
