"""Constants for workdiff."""

# Project marker directory
WORKDIFF_DIR = ".workdiff"

# Configuration file (inside WORKDIFF_DIR)
CONFIG_FILE = "config.yaml"

# Environment overrides for ResolverConfig
ENV_HEAD_DECODING = "WORKDIFF_HEAD_DECODING"
ENV_WORKDIR_DECODING = "WORKDIFF_WORKDIR_DECODING"
ENV_ENCODING = "WORKDIFF_ENCODING"

# Version
WORKDIFF_VERSION = "0.1.0"
