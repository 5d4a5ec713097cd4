"""Orchestrate one module invocation of the analysis goal.

Linear flow, no retries:

    gate check -> explicit skip -> version audit -> global properties
        -> property skip -> module conversion -> assembly -> engine

Delayed and skipped invocations return before any module conversion, and
the engine is invoked at most once. Errors from lower components propagate
unchanged.
"""

from collections.abc import Mapping
from typing import Any

from reactorscan import environment
from reactorscan import properties as props
from reactorscan.compiler import CompilerResolver, DescriptorCompilerResolver
from reactorscan.config_runtime import DEFAULTS
from reactorscan.converter import ProjectConverter
from reactorscan.decryptor import PropertyDecryptor
from reactorscan.engine import AnalysisEngine
from reactorscan.errors import AnalysisFailedError
from reactorscan.gate import audit_plugin_version, should_run
from reactorscan.models import ExecutionContext, GateDecision
from reactorscan.pipeline.factory import BootstrapperFactory
from reactorscan.pipeline.structures import BootstrapOutcome
from reactorscan.secure import SecureDispatcher
from reactorscan.utils.logging import logger


class Bootstrapper:
    """Run the gate, assemble configuration and hand it to the engine."""

    def __init__(
        self,
        context: ExecutionContext,
        dispatcher: SecureDispatcher,
        engine: AnalysisEngine,
        compiler_resolver: CompilerResolver | None = None,
        config: Mapping[str, Any] | None = None,
    ):
        self.context = context
        self.dispatcher = dispatcher
        self.engine = engine
        self.config = config or DEFAULTS
        self.compiler_resolver = compiler_resolver or DescriptorCompilerResolver(
            default_source=self.config["compiler"]["default_source"],
            default_target=self.config["compiler"]["default_target"],
        )
        self.last_properties: dict[str, str] | None = None

    def execute(self) -> BootstrapOutcome:
        reactor_cfg = self.config["reactor"]

        if should_run(self.context, reactor_cfg["detached_execution_id"]) is GateDecision.DELAY:
            logger.info("Delaying analysis to the end of multi-module project")
            return BootstrapOutcome.DELAYED

        if self.is_skip():
            return BootstrapOutcome.SKIPPED

        audit_plugin_version(self.context, reactor_cfg["goal_prefix"], reactor_cfg["goal"])

        env_properties = environment.load(self.context.environment)
        decryptor = PropertyDecryptor(self.dispatcher)
        factory = BootstrapperFactory(
            self.context,
            env_properties,
            decryptor,
            self.engine,
            app_name=self.config["engine"]["app_name"],
        )

        global_properties = factory.create_global_properties()
        if self.is_skip(global_properties):
            return BootstrapOutcome.SKIPPED

        entry_point = factory.create()
        converter = ProjectConverter(self.compiler_resolver, env_properties)
        module_properties = converter.configure(
            self.context.modules or (self.context.current_module,),
            self.context.top_level_module,
            self.context.user_properties,
        )
        final_properties = factory.assemble(global_properties, module_properties)
        self.last_properties = final_properties

        if not entry_point.analyze(final_properties):
            raise AnalysisFailedError("Analysis failed: the analysis engine reported an error")
        return BootstrapOutcome.COMPLETED

    def is_skip(self, properties: Mapping[str, str] | None = None) -> bool:
        """Explicit skip flag first, then the ``sonar.skip`` property."""
        if self.context.skip:
            logger.info(f"{props.SKIP} = true: Skipping analysis")
            return True

        if properties is not None and props.is_true(properties.get(props.SKIP)):
            logger.info("Analysis skipped")
            return True
        return False
