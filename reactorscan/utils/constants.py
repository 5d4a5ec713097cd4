"""Centralized constants for reactorscan.

Single source of truth for paths, sentinel values and environment variable
names used across the package.
"""

from pathlib import Path

# ============================================================================
# OUTPUT DIRECTORIES
# ============================================================================

# Working directory for reactorscan artifacts
WORK_DIR = Path("./.rscan")

ERROR_LOG_FILE = WORK_DIR / "error.log"
CONFIG_FILE = WORK_DIR / "config.json"
REPORT_FILE = WORK_DIR / "analysis_properties.json"

# ============================================================================
# BUILD TOOL CONVENTIONS
# ============================================================================

# Execution id the build tool assigns to goals invoked directly from the CLI
DETACHED_EXECUTION_ID = "default-cli"

# Plugin versions that float to whatever the repository serves
FLOATING_VERSIONS = ("LATEST", "RELEASE")

DEFAULT_PLUGIN_GROUP_ID = "org.sonarsource.scanner.maven"
DEFAULT_PLUGIN_ARTIFACT_ID = "sonar-maven-plugin"
DEFAULT_GOAL_PREFIX = "sonar"
DEFAULT_GOAL_NAME = "sonar"

# ============================================================================
# ENVIRONMENT VARIABLES
# ============================================================================

ENV_PREFIX = "REACTORSCAN_"
ENV_LOG_LEVEL = "REACTORSCAN_LOG_LEVEL"
ENV_LOG_JSON = "REACTORSCAN_LOG_JSON"
ENV_LOG_FILE = "REACTORSCAN_LOG_FILE"
ENV_REQUEST_ID = "REACTORSCAN_REQUEST_ID"
