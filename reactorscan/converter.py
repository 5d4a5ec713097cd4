"""Convert build modules into analysis properties.

One module produces identity, link, source layout, compiler and encoding
properties. A whole reactor is flattened into a single mapping: the top-level
module's keys are unprefixed and every descendant's keys are prefixed with
its module path, e.g. ``com.acme:core.com.acme:core-api.sonar.sources``.
"""

import locale
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from reactorscan import properties as props
from reactorscan.compiler import CompilerResolver
from reactorscan.errors import ProjectStructureError
from reactorscan.models import ModuleDescriptor
from reactorscan.utils.logging import logger


def _existing_dirs(paths: Sequence[Path]) -> list[Path]:
    return [p for p in paths if p.is_dir() and os.access(p, os.R_OK)]


def _existing_paths(paths: Sequence[Path]) -> list[Path]:
    return [p for p in paths if p.exists()]


class ProjectConverter:
    """Derive analysis properties from module descriptors."""

    def __init__(self, compiler_resolver: CompilerResolver, env_properties: Mapping[str, str]):
        self.compiler_resolver = compiler_resolver
        self.env_properties = dict(env_properties)

    def convert(
        self,
        module: ModuleDescriptor,
        environment: Mapping[str, str] | None = None,
        top_level: bool = False,
    ) -> dict[str, str]:
        """Build the property mapping contributed by one module.

        Args:
            module: The module to convert
            environment: Explicit overrides; only ``sonar.sources`` and
                ``sonar.tests`` are consulted, and only for the top level
            top_level: Whether ``module`` is the root of the analyzed tree

        Returns:
            The module's properties, unprefixed

        Raises:
            ProjectStructureError: An explicitly configured source or test
                path does not exist
        """
        environment = environment if environment is not None else self.env_properties
        result: dict[str, str] = {
            props.PROJECT_KEY: module.module_id,
            props.PROJECT_NAME: module.display_name,
            props.PROJECT_VERSION: module.version,
            props.PROJECT_BASE_DIR: str(module.base_dir),
        }
        if module.description:
            result[props.PROJECT_DESCRIPTION] = module.description
        if top_level and module.build_dir is not None:
            result[props.WORKING_DIRECTORY] = str(module.resolve(module.build_dir) / "sonar")

        for name, url in module.links.as_dict().items():
            result[props.LINKS_PREFIX + name] = url

        self._add_layout(module, environment if top_level else {}, result)
        self._add_compiler(module, result)
        self._add_encoding(module, result)

        # The module's own analysis properties win over anything derived
        for key, value in module.properties.items():
            if key.startswith("sonar.") and key not in (props.SOURCES, props.TESTS, props.SKIP):
                result[key] = value

        return result

    def configure(
        self,
        modules: Sequence[ModuleDescriptor],
        top_level: ModuleDescriptor | None = None,
        user_properties: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Flatten a reactor into one property mapping.

        Args:
            modules: Reactor modules in dependency order
            top_level: Root of the analyzed tree; defaults to the first
                module without a parent in the reactor
            user_properties: Command-line properties; their explicit
                ``sonar.sources``/``sonar.tests`` apply to the top level

        Returns:
            Property mapping for the whole tree
        """
        if not modules and top_level is None:
            return {}
        root = top_level or self._find_root(modules)
        children = self._children_by_parent(modules, root)

        explicit = dict(self.env_properties)
        explicit.update(user_properties or {})

        result: dict[str, str] = {}
        self._collect(root, "", children, explicit, result, top=True)
        return result

    def _collect(
        self,
        module: ModuleDescriptor,
        prefix: str,
        children: Mapping[str, list[ModuleDescriptor]],
        explicit: Mapping[str, str],
        result: dict[str, str],
        top: bool = False,
    ) -> None:
        for key, value in self.convert(module, explicit if top else {}, top_level=top).items():
            result[prefix + key] = value

        kept = []
        for child in children.get(module.module_id, []):
            if props.is_true(child.properties.get(props.SKIP)):
                logger.info(f"Module {child.module_id} skipped ({props.SKIP}=true)")
                continue
            kept.append(child)

        if kept:
            result[prefix + props.MODULES] = props.join_values(c.module_id for c in kept)
        for child in kept:
            self._collect(child, f"{prefix}{child.module_id}.", children, explicit, result)

    @staticmethod
    def _find_root(modules: Sequence[ModuleDescriptor]) -> ModuleDescriptor:
        ids = {m.module_id for m in modules}
        for module in modules:
            if module.parent is None or module.parent not in ids:
                return module
        return modules[0]

    @staticmethod
    def _children_by_parent(
        modules: Sequence[ModuleDescriptor], root: ModuleDescriptor
    ) -> dict[str, list[ModuleDescriptor]]:
        """Group modules under their parent, keeping dependency order.

        Modules whose parent is outside the reactor hang off the root.
        """
        ids = {m.module_id for m in modules} | {root.module_id}
        children: dict[str, list[ModuleDescriptor]] = {}
        for module in modules:
            if module.module_id == root.module_id:
                continue
            parent = module.parent if module.parent in ids else root.module_id
            children.setdefault(parent, []).append(module)
        return children

    def _add_layout(
        self, module: ModuleDescriptor, explicit: Mapping[str, str], result: dict[str, str]
    ) -> None:
        explicit_sources = explicit.get(props.SOURCES) or module.properties.get(props.SOURCES)
        explicit_tests = explicit.get(props.TESTS) or module.properties.get(props.TESTS)

        if explicit_sources is not None:
            sources = self._required_paths(module, props.SOURCES, explicit_sources)
        else:
            sources = _existing_dirs([module.resolve(p) for p in module.source_roots])
            if module.build_file is not None and module.resolve(module.build_file).is_file():
                sources.append(module.resolve(module.build_file))
        if explicit_tests is not None:
            tests = self._required_paths(module, props.TESTS, explicit_tests)
        else:
            tests = _existing_dirs([module.resolve(p) for p in module.test_roots])

        if sources:
            result[props.SOURCES] = props.join_values(sources)
        if tests:
            result[props.TESTS] = props.join_values(tests)

        if module.output_dir is not None and module.resolve(module.output_dir).is_dir():
            result[props.JAVA_BINARIES] = str(module.resolve(module.output_dir))
        if module.test_output_dir is not None and module.resolve(module.test_output_dir).is_dir():
            result[props.JAVA_TEST_BINARIES] = str(module.resolve(module.test_output_dir))

        libraries = _existing_paths([module.resolve(p) for p in module.dependencies])
        if libraries:
            result[props.JAVA_LIBRARIES] = props.join_values(libraries)
        test_libraries = _existing_paths([module.resolve(p) for p in module.test_dependencies])
        if test_libraries:
            result[props.JAVA_TEST_LIBRARIES] = props.join_values(test_libraries)

    @staticmethod
    def _required_paths(module: ModuleDescriptor, key: str, raw: str) -> list[Path]:
        paths = []
        for entry in (part.strip() for part in raw.split(",")):
            if not entry:
                continue
            path = module.resolve(entry)
            if not path.exists():
                raise ProjectStructureError(
                    f"The folder '{entry}' configured in '{key}' does not exist "
                    f"for module '{module.module_id}' (base directory {module.base_dir})",
                    module_id=module.module_id,
                    path=str(path),
                )
            paths.append(path)
        return paths

    def _add_compiler(self, module: ModuleDescriptor, result: dict[str, str]) -> None:
        levels = self.compiler_resolver.resolve(module)
        for key, value in (
            (props.JAVA_SOURCE, levels.source),
            (props.JAVA_TARGET, levels.target),
            (props.JAVA_RELEASE, levels.release),
            (props.JAVA_JDK_HOME, levels.jdk_home),
        ):
            if value is not None:
                result[key] = value

    @staticmethod
    def _add_encoding(module: ModuleDescriptor, result: dict[str, str]) -> None:
        encoding = module.encoding or module.properties.get("project.build.sourceEncoding")
        if not encoding:
            encoding = locale.getpreferredencoding(False)
            logger.warning(
                f"Source encoding not set for {module.module_id}, using platform encoding "
                f"{encoding}, i.e. analysis is platform dependent"
            )
        result[props.SOURCE_ENCODING] = encoding
