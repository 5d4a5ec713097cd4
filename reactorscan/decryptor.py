"""Resolve secure references inside property values.

A secure reference is ``${secure:<name>}``; a value may hold several of them
embedded in other text. Resolution is all-or-nothing: either every reference
in the mapping resolves, or SecretResolutionError is raised and nothing is
returned. Plaintext values are never logged.
"""

import re
from collections.abc import Mapping

from reactorscan.errors import SecretResolutionError, SecretStoreUnavailableError
from reactorscan.secure import SecureDispatcher
from reactorscan.utils.logging import logger

SECURE_MARKER = "${secure:"
SECURE_REFERENCE = re.compile(r"\$\{secure:([^{}\s]+)\}")


class ResolvedValue(str):
    """A property value whose secure references were already substituted.

    Plaintext may itself contain the secure marker, so resolved values are
    never scanned again.
    """


def has_secure_reference(value: str) -> bool:
    return SECURE_MARKER in value and not isinstance(value, ResolvedValue)


class PropertyDecryptor:
    """Replace secure references with plaintext from a SecureDispatcher."""

    def __init__(self, dispatcher: SecureDispatcher):
        self.dispatcher = dispatcher

    def decrypt_value(self, value: str, key: str | None = None) -> str:
        """Resolve every secure reference in ``value``.

        Args:
            value: Raw property value
            key: Property key, used only to label errors

        Returns:
            ``value`` unchanged when it holds no reference or was already
            resolved, otherwise a ResolvedValue with each reference replaced
            by its plaintext.

        Raises:
            SecretResolutionError: A reference is malformed or unresolvable
        """
        if not has_secure_reference(value):
            return value

        well_formed = len(SECURE_REFERENCE.findall(value))
        if well_formed != value.count(SECURE_MARKER):
            raise SecretResolutionError(
                f"Malformed secure reference in property '{key or '<value>'}'",
                key=key,
            )

        def _resolve(match: re.Match) -> str:
            reference = match.group(1)
            try:
                return self.dispatcher.resolve(reference)
            except KeyError as e:
                raise SecretResolutionError(
                    f"Secure reference '{reference}' for property '{key or '<value>'}' "
                    f"is not defined in {self.dispatcher!r}",
                    key=key,
                    reference=reference,
                ) from e
            except (SecretStoreUnavailableError, OSError) as e:
                raise SecretResolutionError(
                    f"Secure reference '{reference}' for property '{key or '<value>'}' "
                    f"could not be resolved: {e}",
                    key=key,
                    reference=reference,
                ) from e

        # Substitute in one pass so resolved plaintext is never re-scanned
        return ResolvedValue(SECURE_REFERENCE.sub(_resolve, value))

    def decrypt_properties(self, properties: Mapping[str, str]) -> dict[str, str]:
        """Return a copy of ``properties`` with all secure references resolved."""
        decrypted = {}
        for key, value in properties.items():
            resolved = self.decrypt_value(value, key=key)
            if resolved is not value:
                logger.debug(f"Resolved secure reference in property '{key}'")
            decrypted[key] = resolved
        return decrypted
