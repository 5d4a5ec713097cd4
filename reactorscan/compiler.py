"""Compiler level resolution for build modules.

Provides a narrow interface the project converter depends on:
- CompilerResolver: abstract resolver
- DescriptorCompilerResolver: reads the levels a module declares and falls
  back to the compiler plugin's documented defaults
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from reactorscan.models import ModuleDescriptor
from reactorscan.utils.logging import logger

# Defaults of the compiler plugin when a module declares nothing
DEFAULT_SOURCE_LEVEL = "1.8"
DEFAULT_TARGET_LEVEL = "1.8"


@dataclass(frozen=True)
class CompilerLevels:
    """Effective compiler levels for one module."""

    source: str | None
    target: str | None
    release: str | None = None
    jdk_home: str | None = None


class CompilerResolver(ABC):
    """Resolve the effective compiler levels of a module."""

    @abstractmethod
    def resolve(self, module: ModuleDescriptor) -> CompilerLevels:
        ...


class DescriptorCompilerResolver(CompilerResolver):
    """Resolve levels from the module descriptor.

    Explicit ``maven.compiler.*`` properties of the module win over the
    structured compiler settings; missing source/target levels fall back to
    the configured defaults. ``release`` has no default, but when declared it
    fills whichever of source/target is missing.
    """

    PROPERTY_SOURCE = "maven.compiler.source"
    PROPERTY_TARGET = "maven.compiler.target"
    PROPERTY_RELEASE = "maven.compiler.release"

    def __init__(
        self,
        default_source: str = DEFAULT_SOURCE_LEVEL,
        default_target: str = DEFAULT_TARGET_LEVEL,
    ):
        self.default_source = default_source
        self.default_target = default_target

    def resolve(self, module: ModuleDescriptor) -> CompilerLevels:
        declared = module.compiler
        source = module.properties.get(self.PROPERTY_SOURCE) or declared.source
        target = module.properties.get(self.PROPERTY_TARGET) or declared.target
        release = module.properties.get(self.PROPERTY_RELEASE) or declared.release

        if release is not None:
            # release implies both levels
            source = source or release
            target = target or release
        else:
            if source is None:
                logger.debug(
                    f"No compiler source level declared for {module.module_id}, "
                    f"using default {self.default_source}"
                )
                source = self.default_source
            if target is None:
                target = self.default_target

        return CompilerLevels(
            source=source,
            target=target,
            release=release,
            jdk_home=declared.jdk_home,
        )
