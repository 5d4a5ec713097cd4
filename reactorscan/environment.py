"""Extract analysis properties from a snapshot of the process environment.

Recognized variables:
- SONARQUBE_SCANNER_PARAMS: legacy JSON object of properties (deprecated)
- SONAR_SCANNER_JSON_PARAMS: JSON object of properties
- SONAR_SCANNER_<NAME>: mapped to sonar.scanner.<camelCaseName>
- SONAR_TOKEN, SONAR_HOST_URL, SONAR_USER_HOME, SONAR_REGION

Individual variables win over the JSON blobs, and the current JSON variable
wins over the legacy one. Everything else in the environment is dropped.
"""

import json
from collections.abc import Mapping

from reactorscan import properties as props
from reactorscan.utils.logging import logger

LEGACY_JSON_PARAMS = "SONARQUBE_SCANNER_PARAMS"
JSON_PARAMS = "SONAR_SCANNER_JSON_PARAMS"
SCANNER_ENV_PREFIX = "SONAR_SCANNER_"

SIMPLE_VARIABLES = {
    "SONAR_TOKEN": props.TOKEN,
    "SONAR_HOST_URL": props.HOST_URL,
    "SONAR_USER_HOME": props.USER_HOME,
    "SONAR_REGION": props.REGION,
}


def _to_camel_case(name: str) -> str:
    """SOME_SETTING_NAME -> someSettingName"""
    parts = [p for p in name.lower().split("_") if p]
    if not parts:
        return ""
    return parts[0] + "".join(p.capitalize() for p in parts[1:])


def _parse_json_params(variable: str, raw: str) -> dict[str, str]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Ignoring {variable}: value is not valid JSON ({e.msg})")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring {variable}: expected a JSON object")
        return {}

    parsed = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        parsed[str(key)] = str(value)
    return parsed


def load(raw_environment: Mapping[str, str]) -> dict[str, str]:
    """Build the environment property mapping.

    Args:
        raw_environment: Snapshot of environment variables

    Returns:
        Property mapping; empty when nothing relevant is set
    """
    loaded: dict[str, str] = {}

    legacy = raw_environment.get(LEGACY_JSON_PARAMS)
    if legacy:
        logger.warning(
            f"{LEGACY_JSON_PARAMS} is deprecated, use {JSON_PARAMS} instead"
        )
        loaded.update(_parse_json_params(LEGACY_JSON_PARAMS, legacy))

    current = raw_environment.get(JSON_PARAMS)
    if current:
        loaded.update(_parse_json_params(JSON_PARAMS, current))

    for variable in sorted(raw_environment):
        if variable == JSON_PARAMS or not variable.startswith(SCANNER_ENV_PREFIX):
            continue
        suffix = _to_camel_case(variable[len(SCANNER_ENV_PREFIX):])
        if suffix:
            loaded[props.SCANNER_PREFIX + suffix] = raw_environment[variable]

    for variable, key in SIMPLE_VARIABLES.items():
        value = raw_environment.get(variable)
        if value is not None:
            if key in loaded and loaded[key] != value:
                logger.debug(f"{variable} overrides '{key}' from JSON parameters")
            loaded[key] = value

    return loaded
