"""Per-run state shared by suites: sequences, factories and mocks."""

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from suiterun.config import SuiteRunConfig
from suiterun.core import mock as mocking
from suiterun.factory import FactoryRegistry, SequenceCounter


class RunContext:
    """Everything a run shares between its suites.

    A fresh context per run keeps runs hermetic; nothing here is global.
    """

    def __init__(
        self,
        config: Optional[SuiteRunConfig] = None,
        base_dir: Path | str | None = None,
    ):
        self.config = config or SuiteRunConfig()
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

        paths = self.config.get_absolute_paths(self.base_dir)
        self.sequences = SequenceCounter()
        self.factories = FactoryRegistry(
            directory=paths["factory_directory"],
            suffix=self.config.factories.suffix,
            sequences=self.sequences,
        )

    def increment_sequence(self, key: str) -> int:
        """Next value for ``key``, starting at 1."""
        return self.sequences.increment(key)

    def make(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        return self.factories.make(name, overrides, traits)

    def create(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        return self.factories.create(name, overrides, traits)

    def mock(self, target: Union[type, str]) -> mocking.MockInstance:
        return mocking.mock(target)

    def reset(self) -> None:
        """Clear sequences, factory registrations and the factory scan flag."""
        self.factories.reset()
