"""Data models for architecture analysis.

Python attributes are snake_case; serialized field names are camelCase so
the JSON report keeps the field names reporting tools already consume.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ComponentType = Literal["page", "component", "layout", "api", "utility"]
CouplingScore = Literal["good", "moderate", "high"]
ComplexityScore = Literal["simple", "moderate", "complex", "very-complex"]
CycleSeverity = Literal["warning", "error"]


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Component(_Record):
    """One source file from the component catalog."""

    name: str
    path: str = Field(min_length=1)
    type: ComponentType
    imports: list[str] = Field(default_factory=list)
    exports: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)  # relative imports only
    lines_of_code: int = Field(ge=0)


class CouplingMetric(_Record):
    component: str
    afferent_coupling: int
    efferent_coupling: int
    instability: float
    score: CouplingScore


class DuplicationInstance(_Record):
    files: tuple[str, str]
    lines: int
    similarity: float
    snippet: str
    suggestion: str


class ComplexityMetric(_Record):
    file: str
    function_name: str = Field(alias="function")
    cyclomatic_complexity: int
    cognitive_complexity: int
    lines_of_code: int
    score: ComplexityScore


class CircularDependency(_Record):
    cycle: list[str]  # closed walk: first path repeated at the end
    severity: CycleSeverity


class ArchitectureAnalysis(_Record):
    """Complete result of one analysis run."""

    analyzed_at: str
    coupling: list[CouplingMetric]
    duplication: list[DuplicationInstance]
    complexity: list[ComplexityMetric]
    circular_dependencies: list[CircularDependency]
    health_score: int = Field(ge=0, le=100)

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with the camelCase wire names."""
        return self.model_dump_json(by_alias=True, indent=indent)
