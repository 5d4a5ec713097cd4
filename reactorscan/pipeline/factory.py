"""Assemble the final analysis properties and the engine entry point.

Precedence, lowest first:
    environment < global properties (decrypted) < module properties

Global properties themselves layer the top-level module's build properties,
system properties and command-line user properties over the environment.
User properties are final: module-derived values never replace them.
"""

from collections.abc import Mapping

from reactorscan import __version__
from reactorscan import properties as props
from reactorscan.decryptor import PropertyDecryptor, has_secure_reference
from reactorscan.engine import AnalysisEngine
from reactorscan.models import ExecutionContext
from reactorscan.pipeline.structures import EngineEntryPoint
from reactorscan.properties import PropertyLayer, merge_layers
from reactorscan.utils.logging import logger


class BootstrapperFactory:
    """Build global properties, the merged mapping and the engine entry point."""

    def __init__(
        self,
        context: ExecutionContext,
        env_properties: Mapping[str, str],
        decryptor: PropertyDecryptor,
        engine: AnalysisEngine,
        app_name: str = "ScannerMaven",
        app_version: str = __version__,
    ):
        self.context = context
        self.env_properties = dict(env_properties)
        self.decryptor = decryptor
        self.engine = engine
        self.app_name = app_name
        self.app_version = app_version

    def create_global_properties(self) -> dict[str, str]:
        """Merge and decrypt the non-module properties.

        Raises:
            SecretResolutionError: A secure reference could not be resolved
        """
        top = self.context.top_level_module or self.context.current_module
        merged = merge_layers(
            [
                PropertyLayer("environment", self.env_properties),
                PropertyLayer("build", top.properties),
                PropertyLayer("system", self.context.system_properties),
                PropertyLayer("user", self.context.user_properties, final=True),
            ]
        )
        return self.decryptor.decrypt_properties(merged)

    def assemble(
        self, global_properties: Mapping[str, str], module_properties: Mapping[str, str]
    ) -> dict[str, str]:
        """Layer environment, global and module properties into the final mapping.

        Args:
            global_properties: Output of create_global_properties()
            module_properties: Output of ProjectConverter.configure()

        Returns:
            Mapping with no unresolved secure references

        Raises:
            SecretResolutionError: A module property holds an unresolvable reference
        """
        user_keys = {
            key: global_properties[key]
            for key in self.context.user_properties
            if key in global_properties
        }
        merged = merge_layers(
            [
                PropertyLayer("environment", self.env_properties),
                PropertyLayer("global", global_properties),
                PropertyLayer("user", user_keys, final=True),
                PropertyLayer("module", self.decryptor.decrypt_properties(module_properties)),
            ]
        )

        # Environment keys absent from the global layer were never decrypted
        pending = {
            key: value
            for key, value in merged.items()
            if has_secure_reference(value) and key not in global_properties
        }
        if pending:
            merged.update(self.decryptor.decrypt_properties(pending))

        logger.debug(f"Assembled {len(merged)} analysis properties")
        return merged

    def bootstrap_properties(self) -> dict[str, str]:
        """Static facts about this runtime, handed to the engine alongside the mapping."""
        bootstrap = {
            props.SCANNER_APP: self.app_name,
            props.SCANNER_APP_VERSION: self.app_version,
            props.SCANNER_EXECUTION_ID: self.context.execution_id,
        }
        if self.context.runtime_version:
            bootstrap[props.SCANNER_RUNTIME_VERSION] = self.context.runtime_version
        return bootstrap

    def create(self) -> EngineEntryPoint:
        return EngineEntryPoint(engine=self.engine, bootstrap=self.bootstrap_properties())
