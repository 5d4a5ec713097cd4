"""Analysis property keys and layered property merging.

A property mapping is a plain ``dict[str, str]``. Layers are merged in order,
later layers winning on collision, except for keys an earlier layer locked as
final. ``None`` values never enter a merged mapping.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from reactorscan.utils.logging import logger

SKIP = "sonar.skip"
TOKEN = "sonar.token"
HOST_URL = "sonar.host.url"
USER_HOME = "sonar.userHome"
REGION = "sonar.region"

PROJECT_KEY = "sonar.projectKey"
PROJECT_NAME = "sonar.projectName"
PROJECT_VERSION = "sonar.projectVersion"
PROJECT_DESCRIPTION = "sonar.projectDescription"
PROJECT_BASE_DIR = "sonar.projectBaseDir"
WORKING_DIRECTORY = "sonar.working.directory"
MODULES = "sonar.modules"
SOURCES = "sonar.sources"
TESTS = "sonar.tests"
SOURCE_ENCODING = "sonar.sourceEncoding"
LINKS_PREFIX = "sonar.links."

JAVA_SOURCE = "sonar.java.source"
JAVA_TARGET = "sonar.java.target"
JAVA_RELEASE = "sonar.java.release"
JAVA_JDK_HOME = "sonar.java.jdkHome"
JAVA_BINARIES = "sonar.java.binaries"
JAVA_TEST_BINARIES = "sonar.java.test.binaries"
JAVA_LIBRARIES = "sonar.java.libraries"
JAVA_TEST_LIBRARIES = "sonar.java.test.libraries"

SCANNER_PREFIX = "sonar.scanner."
SCANNER_APP = "sonar.scanner.app"
SCANNER_APP_VERSION = "sonar.scanner.appVersion"
SCANNER_RUNTIME_VERSION = "sonar.scanner.buildToolVersion"
SCANNER_EXECUTION_ID = "sonar.scanner.executionId"

SENSITIVE_MARKERS = ("token", "password", "login", "secret")


def is_sensitive(key: str) -> bool:
    """True for keys whose values must never be displayed."""
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_MARKERS)


def masked(properties: Mapping[str, str]) -> dict[str, str]:
    """Copy of ``properties`` with sensitive values replaced, for display only."""
    return {key: ("******" if is_sensitive(key) else value) for key, value in properties.items()}


def is_true(value: str | None) -> bool:
    return value is not None and value.lower() == "true"


def join_values(values: Iterable[object]) -> str:
    """Join list-valued properties the way the engine expects them."""
    return ",".join(str(v) for v in values)


@dataclass(frozen=True)
class PropertyLayer:
    """One named source of properties in a layered merge.

    Attributes:
        name: Label used in debug output (e.g. "environment", "user")
        values: The layer's key/value pairs
        final: When True every key of this layer is locked against later layers
    """

    name: str
    values: Mapping[str, str] = field(default_factory=dict)
    final: bool = False


def merge_layers(layers: Iterable[PropertyLayer]) -> dict[str, str]:
    """Merge layers lowest-precedence first.

    Args:
        layers: Layers ordered from lowest to highest precedence

    Returns:
        New mapping; later layers overwrite earlier ones unless the key was
        locked by a final layer, in which case the locked value is kept.
    """
    merged: dict[str, str] = {}
    locked: dict[str, str] = {}

    for layer in layers:
        for key, value in layer.values.items():
            if value is None:
                continue
            if key in locked:
                if merged.get(key) != str(value):
                    logger.debug(
                        f"Keeping '{key}' from {locked[key]} layer, ignoring {layer.name} layer"
                    )
                continue
            merged[key] = value if isinstance(value, str) else str(value)
        if layer.final:
            for key in layer.values:
                if key in merged:
                    locked.setdefault(key, layer.name)

    return merged
