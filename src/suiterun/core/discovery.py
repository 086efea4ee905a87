"""Suite discovery by filesystem convention."""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

from suiterun.config import DiscoveryConfig
from suiterun.core.models import SuiteDescriptor
from suiterun.core.suite import Suite
from suiterun.errors import SuiteLoadError
from suiterun.loader import classes_defined_in, load_module, module_name_for

logger = logging.getLogger(__name__)

LoadErrorPolicy = Literal["warn", "ignore", "raise"]


@dataclass
class DiscoveryWarning:
    """A suite file that matched the naming convention but could not be used."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass
class DiscoveryResult:
    """Result of suite discovery."""

    suites: list[SuiteDescriptor] = field(default_factory=list)
    warnings: list[DiscoveryWarning] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        """Number of test methods across all discovered suites."""
        return sum(s.test_count for s in self.suites)


class SuiteDiscovery:
    """Finds suite classes under a root directory."""

    def __init__(
        self,
        root: Path | str,
        suffix: str = "_suite",
        extension: str = ".py",
        on_load_error: LoadErrorPolicy = "warn",
    ):
        """Initialize suite discovery.

        Args:
            root: Directory scanned recursively, or a single suite file
            suffix: File name suffix (before the extension) marking suite files
            extension: Suite file extension
            on_load_error: What to do with files that fail to import or construct
        """
        self.root = Path(root)
        self.suffix = suffix
        self.extension = extension
        self.on_load_error = on_load_error

    @classmethod
    def from_config(cls, config: DiscoveryConfig, root: Path | str) -> "SuiteDiscovery":
        return cls(
            root=root,
            suffix=config.suffix,
            extension=config.extension,
            on_load_error=config.on_load_error,
        )

    def find_files(self, pattern: Optional[str] = None) -> list[Path]:
        """List suite files under the root, sorted, optionally glob-filtered."""
        ending = f"{self.suffix}{self.extension}"

        if self.root.is_file():
            base = self.root.parent
            files = [self.root] if self.root.name.endswith(ending) else []
        elif self.root.is_dir():
            base = self.root
            files = sorted(p for p in self.root.rglob(f"*{ending}") if p.is_file())
        else:
            return []

        if pattern:
            files = [
                p for p in files
                if fnmatch.fnmatch(p.relative_to(base).as_posix(), pattern)
            ]
        return files

    def discover(
        self,
        pattern: Optional[str] = None,
        name_filter: Optional[str] = None,
    ) -> DiscoveryResult:
        """Discover suites under the root.

        Args:
            pattern: Glob matched against each file's path relative to the root
            name_filter: Substring a ``suite::method`` name must contain to be kept

        Returns:
            DiscoveryResult with descriptors and any load warnings
        """
        result = DiscoveryResult()
        base = self.root.parent if self.root.is_file() else self.root

        for path in self.find_files(pattern):
            module_name = module_name_for(path, base)
            try:
                descriptors = self._load_suites(path, module_name)
            except KeyboardInterrupt:
                raise
            except BaseException as e:
                # sys.exit() or a skip signal at import time only affects this file
                self._handle_load_error(result, path, e)
                continue

            for descriptor in descriptors:
                if name_filter:
                    descriptor = self._filter(descriptor, name_filter)
                if descriptor.test_method_names:
                    result.suites.append(descriptor)

        logger.debug(
            "Discovered %d suites with %d tests under %s",
            len(result.suites),
            result.total_count,
            self.root,
        )
        return result

    def _load_suites(self, path: Path, module_name: str) -> list[SuiteDescriptor]:
        module = load_module(path, module_name)
        descriptors = []
        for cls in classes_defined_in(module):
            if not issubclass(cls, Suite) or cls.abstract:
                continue
            instance = cls()
            descriptors.append(
                SuiteDescriptor(
                    source_path=path,
                    qualified_name=f"{module_name}.{cls.__qualname__}",
                    test_method_names=tuple(instance.get_test_methods()),
                    suite_class=cls,
                )
            )
        return descriptors

    def _handle_load_error(
        self, result: DiscoveryResult, path: Path, error: BaseException
    ) -> None:
        reason = f"{type(error).__name__}: {error}"
        if self.on_load_error == "raise":
            raise SuiteLoadError(str(path), reason) from error
        if self.on_load_error == "warn":
            result.warnings.append(DiscoveryWarning(path=path, reason=reason))
            logger.warning("Skipping suite file %s: %s", path, reason)
        else:
            logger.debug("Ignoring suite file %s: %s", path, reason)

    @staticmethod
    def _filter(descriptor: SuiteDescriptor, name_filter: str) -> SuiteDescriptor:
        kept = tuple(
            name
            for name in descriptor.test_method_names
            if name_filter in f"{descriptor.qualified_name}::{name}"
        )
        return SuiteDescriptor(
            source_path=descriptor.source_path,
            qualified_name=descriptor.qualified_name,
            test_method_names=kept,
            suite_class=descriptor.suite_class,
        )
