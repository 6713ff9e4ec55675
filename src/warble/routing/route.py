"""CompiledRoute, RouteMatch, and NoMatch frozen dataclasses."""

from dataclasses import dataclass, field
from typing import Any, TypeAlias

from warble._internal.types import ExtractedValues
from warble.routing.segments import Literal, Option, Parameter, Segment


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A compiled route pattern.

    Produced once by the pattern compiler and never mutated afterwards,
    so any number of resolutions may read it concurrently.

    ``pattern`` is the effective pattern string (group prefix included)
    and is what diagnostics report verbatim.
    """

    pattern: str
    segments: tuple[Segment, ...]
    specificity: int
    handler: Any = field(default=None, compare=False)
    group_prefix: str | None = None
    description: str | None = None

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(s for s in self.segments if isinstance(s, Option))

    @property
    def repeated_options(self) -> tuple[Option, ...]:
        return tuple(s for s in self.segments if isinstance(s, Option) and s.is_repeated)

    @property
    def parameters(self) -> tuple[Parameter, ...]:
        return tuple(s for s in self.segments if isinstance(s, Parameter))

    @property
    def has_catch_all(self) -> bool:
        return any(isinstance(s, Parameter) and s.is_catch_all for s in self.segments)

    @property
    def has_end_of_options(self) -> bool:
        return any(isinstance(s, Literal) and s.is_end_of_options for s in self.segments)

    def parameter_names(self) -> tuple[str, ...]:
        """Every name this route can put into the extracted values."""
        names: list[str] = []
        for segment in self.segments:
            match segment:
                case Parameter(name=name):
                    names.append(name)
                case Option(parameter_name=str() as name):
                    names.append(name)
        return tuple(names)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """The winning candidate of a resolution.

    ``values`` holds raw strings, before type conversion. Repeated
    options are ordered lists. ``defaults_used`` counts the optional
    elements that received no explicit value.
    """

    route: CompiledRoute
    values: ExtractedValues
    defaults_used: int = 0

    @property
    def is_exact(self) -> bool:
        return self.defaults_used == 0


@dataclass(frozen=True, slots=True)
class NoMatch:
    """No route accepted the input. A normal negative result, not an error."""

    args: tuple[str, ...]
    message: str = "No matching command found"


Resolution: TypeAlias = RouteMatch | NoMatch
