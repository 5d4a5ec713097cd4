"""Centralized exit codes for the reactorscan CLI."""


class ExitCodes:
    """Standard exit codes for reactorscan CLI commands."""

    SUCCESS = 0
    DELAYED = 0
    SKIPPED = 0

    ANALYSIS_FAILED = 1
    CONFIGURATION_ERROR = 2

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - analysis ran, was delayed or was skipped",
            cls.ANALYSIS_FAILED: "The analysis engine reported a failure",
            cls.CONFIGURATION_ERROR: "Configuration could not be assembled",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

    @classmethod
    def should_fail_build(cls, code: int) -> bool:
        """Determine if an exit code should fail the surrounding build."""
        return code != cls.SUCCESS
