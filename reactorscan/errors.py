"""Custom exceptions for reactorscan.

Each class marks a failure mode that aborts the current invocation. Gate and
skip outcomes are normal results, never exceptions. None of these carry
secret values in their message.
"""

from reactorscan.utils.exit_codes import ExitCodes


class ReactorScanError(Exception):
    """Base class for all fatal reactorscan failures."""

    exit_code = ExitCodes.CONFIGURATION_ERROR


class SecretStoreUnavailableError(ReactorScanError):
    """Raised by a secret store that cannot be read at all."""

    pass


class SecretResolutionError(ReactorScanError):
    """Raised when a secure reference cannot be resolved to plaintext.

    Attributes:
        key: Property key whose value held the reference
        reference: Name inside ``${secure:...}``, or None when malformed
    """

    def __init__(self, message: str, key: str | None = None, reference: str | None = None):
        super().__init__(message)
        self.key = key
        self.reference = reference


class ProjectStructureError(ReactorScanError):
    """Raised when a module declares a source root that does not exist."""

    def __init__(self, message: str, module_id: str, path: str | None = None):
        super().__init__(message)
        self.module_id = module_id
        self.path = path


class AnalysisFailedError(ReactorScanError):
    """Raised when the analysis engine reports a failed run."""

    exit_code = ExitCodes.ANALYSIS_FAILED


class ReactorDescriptionError(ReactorScanError):
    """Raised when a reactor description file cannot be turned into a context."""

    pass
