"""Secret stores that resolve secure references to plaintext.

The decryptor only sees the narrow SecureDispatcher interface. How a store
protects its values at rest is its own business; these implementations read
values that are already decrypted.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from reactorscan.errors import SecretStoreUnavailableError
from reactorscan.manifest_parser import ManifestParser


class SecureDispatcher(ABC):
    """Resolve the name inside ``${secure:<name>}`` to its plaintext."""

    @abstractmethod
    def resolve(self, reference: str) -> str:
        """Return the plaintext for ``reference``.

        Raises:
            KeyError: The store has no entry for ``reference``
            SecretStoreUnavailableError: The store cannot be reached
        """
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class MappingSecretStore(SecureDispatcher):
    """In-memory store, mostly for embedding and tests."""

    def __init__(self, secrets: Mapping[str, str]):
        self._secrets = dict(secrets)

    def resolve(self, reference: str) -> str:
        return self._secrets[reference]


class SettingsFileSecretStore(SecureDispatcher):
    """Store backed by a JSON/YAML/TOML file of ``name: value`` pairs.

    The file is read on first use, so an invocation that never meets a
    secure reference never touches it.
    """

    def __init__(self, path: Path, parser: ManifestParser | None = None):
        self.path = Path(path)
        self._parser = parser or ManifestParser()
        self._secrets: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._secrets is None:
            try:
                data = self._parser.parse(self.path)
            except (OSError, ValueError) as e:
                raise SecretStoreUnavailableError(
                    f"Secret settings file {self.path} could not be read: {type(e).__name__}"
                ) from e
            self._secrets = {str(k): str(v) for k, v in data.items() if v is not None}
        return self._secrets

    def resolve(self, reference: str) -> str:
        return self._load()[reference]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} path={str(self.path)!r}>"
