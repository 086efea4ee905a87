"""Data factories for building fixture records.

A factory declares base attributes in ``definition()`` and named variations
as ``@trait`` methods. Factories live in files ending in ``_factory.py``
under the factory directory and are registered on first lookup.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from suiterun.errors import FactoryNotFound, UnknownTrait, UsageError
from suiterun.loader import classes_defined_in, load_module, module_name_for

logger = logging.getLogger(__name__)


def trait(func: Callable) -> Callable:
    """Mark a factory method as a named trait returning attribute overrides."""
    func.is_trait = True
    return func


class SequenceCounter:
    """Independent counters per key, each starting at 1."""

    def __init__(self):
        self._counters: dict[str, int] = {}

    def increment(self, key: str) -> int:
        """Advance the counter for ``key`` and return its new value."""
        self._counters[key] = self._counters.get(key, 0) + 1
        return self._counters[key]

    def current(self, key: str) -> int:
        """Last value handed out for ``key``, or 0."""
        return self._counters.get(key, 0)

    def reset(self, key: Optional[str] = None) -> None:
        """Reset one counter, or all of them."""
        if key is None:
            self._counters.clear()
        else:
            self._counters.pop(key, None)


class Factory:
    """Base class for data factories.

    Subclasses override ``definition`` and may set ``model`` to the class
    the factory builds. Without a model, ``make`` returns a plain dict.
    """

    model: Optional[type] = None
    name: Optional[str] = None

    def __init__(self):
        self.sequences: Optional[SequenceCounter] = None

    def definition(self) -> dict[str, Any]:
        """Base attributes every record starts from."""
        return {}

    def sequence(self, key: str) -> int:
        """Next value of a sequence shared across this run's factories."""
        if self.sequences is None:
            self.sequences = SequenceCounter()
        return self.sequences.increment(key)

    def traits(self) -> list[str]:
        """Names of the traits this factory defines."""
        return sorted(
            name
            for name in dir(type(self))
            if not name.startswith("_") and getattr(getattr(type(self), name), "is_trait", False)
        )

    def attributes(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> dict[str, Any]:
        """Merge base attributes, traits in order, then overrides."""
        attributes = dict(self.definition())
        for trait_name in traits:
            method = getattr(self, trait_name, None)
            if method is None or not getattr(method, "is_trait", False):
                raise UnknownTrait(
                    f"{type(self).__name__} has no trait '{trait_name}'",
                    f"Available traits: {', '.join(self.traits()) or '(none)'}",
                )
            attributes.update(method())
        if overrides:
            attributes.update(overrides)
        return attributes

    def build(self, attributes: dict[str, Any]) -> Any:
        """Construct the model without running its validation or constructor."""
        model = self.model
        if model is None:
            return attributes
        if hasattr(model, "model_construct"):
            return model.model_construct(**attributes)
        instance = model.__new__(model)
        instance.__dict__.update(attributes)
        return instance

    def persist(self, instance: Any) -> Any:
        """Save a built instance through its own ``save()``."""
        save = getattr(instance, "save", None)
        if save is None:
            raise UsageError(
                f"Cannot persist {type(instance).__name__}: it has no save() method",
                f"Override {type(self).__name__}.persist() or use make() instead",
            )
        save()
        return instance


class FactoryRegistry:
    """Factories by name, with one lazy scan of the factory directory."""

    def __init__(
        self,
        directory: Path | str | None = None,
        suffix: str = "_factory",
        sequences: Optional[SequenceCounter] = None,
    ):
        self.directory = Path(directory) if directory is not None else None
        self.suffix = suffix
        self.sequences = sequences if sequences is not None else SequenceCounter()
        self._factories: dict[str, Factory] = {}
        self._scanned = False

    @property
    def scanned(self) -> bool:
        return self._scanned

    def names(self) -> list[str]:
        """Registered factory names."""
        return sorted(self._factories)

    def register(self, name: str, factory: Factory) -> None:
        """Register a factory, replacing any earlier one with that name."""
        factory.sequences = self.sequences
        self._factories[name] = factory

    def get(self, name: str) -> Factory:
        """Look up a factory, scanning the factory directory once if needed."""
        if name not in self._factories and not self._scanned:
            self.discover()

        try:
            return self._factories[name]
        except KeyError:
            raise FactoryNotFound(
                f"Factory '{name}' not found",
                f"Available factories: {', '.join(self.names()) or '(none)'}",
            ) from None

    def discover(self) -> None:
        """Scan the factory directory and register what it defines."""
        self._scanned = True
        if self.directory is None or not self.directory.is_dir():
            logger.debug("No factory directory to scan: %s", self.directory)
            return

        for path in sorted(self.directory.rglob(f"*{self.suffix}.py")):
            derived_name = module_name_for(path, self.directory, strip_suffix=self.suffix)
            module_name = "_suiterun_factories." + module_name_for(path, self.directory)
            try:
                module = load_module(path, module_name)
                factory_classes = [
                    cls
                    for cls in classes_defined_in(module)
                    if issubclass(cls, Factory) and cls is not Factory
                ]
                for cls in factory_classes:
                    name = cls.name or derived_name
                    if name not in self._factories:
                        self.register(name, cls())
            except Exception as e:
                logger.debug("Skipping factory file %s: %s", path, e)

    def make(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        """Build a record from a factory without persisting it."""
        factory = self.get(name)
        return factory.build(factory.attributes(overrides, traits))

    def create(
        self,
        name: str,
        overrides: Optional[Mapping[str, Any]] = None,
        traits: Iterable[str] = (),
    ) -> Any:
        """Build a record and persist it through the model's save path."""
        factory = self.get(name)
        instance = factory.build(factory.attributes(overrides, traits))
        return factory.persist(instance)

    def reset(self) -> None:
        """Forget registrations, the scan flag and sequence values."""
        self._factories.clear()
        self._scanned = False
        self.sequences.reset()
