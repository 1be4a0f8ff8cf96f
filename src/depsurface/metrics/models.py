"""Metric value types.

LocReport, UnsafeDetails and DependencySetReport are additive monoids: each
has a zero value and an associative, commutative ``+``. An unsafe report that
the scanner never produced is ``None``, which is not the same thing as a
report whose counters are all zero.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional

from ..graph.models import PackageId


def _check_counters(obj: Any) -> None:
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, int) and not isinstance(value, bool) and value < 0:
            raise ValueError(f"{type(obj).__name__}.{f.name} must be non-negative, got {value}")


@dataclass(frozen=True)
class LocReport:
    """Non-blank, non-comment lines of one package or package set."""

    total_loc: int = 0
    language_loc: int = 0  # primary language only

    def __post_init__(self) -> None:
        _check_counters(self)

    @classmethod
    def zero(cls) -> LocReport:
        return cls()

    def __add__(self, other: LocReport) -> LocReport:
        if not isinstance(other, LocReport):
            return NotImplemented
        return LocReport(
            total_loc=self.total_loc + other.total_loc,
            language_loc=self.language_loc + other.language_loc,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UnsafeDetails:
    """Counts of unsafe items by kind."""

    functions: int = 0
    expressions: int = 0
    impls: int = 0
    traits: int = 0
    methods: int = 0

    def __post_init__(self) -> None:
        _check_counters(self)

    @classmethod
    def zero(cls) -> UnsafeDetails:
        return cls()

    def __add__(self, other: UnsafeDetails) -> UnsafeDetails:
        if not isinstance(other, UnsafeDetails):
            return NotImplemented
        return UnsafeDetails(
            functions=self.functions + other.functions,
            expressions=self.expressions + other.expressions,
            impls=self.impls + other.impls,
            traits=self.traits + other.traits,
            methods=self.methods + other.methods,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UnsafeUsageReport:
    """Scanner verdict for one package.

    ``used`` counts unsafe items compiled into the build, ``unused`` those
    present in source but not built.
    """

    forbids_unsafe: bool = False
    used: UnsafeDetails = field(default_factory=UnsafeDetails)
    unused: UnsafeDetails = field(default_factory=UnsafeDetails)

    @property
    def uses_unsafe(self) -> bool:
        return not self.forbids_unsafe and self.used.expressions > 0

    def to_dict(self) -> dict:
        return {
            "forbids_unsafe": self.forbids_unsafe,
            "used": self.used.to_dict(),
            "unused": self.unused.to_dict(),
        }


@dataclass(frozen=True)
class PackageMetrics:
    """One package's contribution to a dependency-set aggregate."""

    id: PackageId
    loc: LocReport
    has_build_script: bool = False
    unsafe: Optional[UnsafeUsageReport] = None


@dataclass(frozen=True)
class DependencySetReport:
    """Roll-up over a set of packages.

    Unsafe counters only consider packages that the scanner reported on;
    ``total_count`` and ``summed_loc`` consider every package.
    """

    total_count: int = 0
    summed_loc: LocReport = field(default_factory=LocReport)
    count_with_build_script: int = 0
    count_scanned_for_unsafe: int = 0
    count_forbidding_unsafe: int = 0
    count_using_unsafe: int = 0
    summed_used_unsafe_details: UnsafeDetails = field(default_factory=UnsafeDetails)

    def __post_init__(self) -> None:
        _check_counters(self)

    @classmethod
    def zero(cls) -> DependencySetReport:
        return cls()

    @classmethod
    def from_package(cls, metrics: PackageMetrics) -> DependencySetReport:
        """Report over the single-package set {metrics.id}."""
        unsafe = metrics.unsafe
        return cls(
            total_count=1,
            summed_loc=metrics.loc,
            count_with_build_script=int(metrics.has_build_script),
            count_scanned_for_unsafe=int(unsafe is not None),
            count_forbidding_unsafe=int(unsafe is not None and unsafe.forbids_unsafe),
            count_using_unsafe=int(unsafe is not None and unsafe.uses_unsafe),
            summed_used_unsafe_details=unsafe.used if unsafe is not None else UnsafeDetails(),
        )

    def __add__(self, other: DependencySetReport) -> DependencySetReport:
        """Combine reports over two disjoint package sets."""
        if not isinstance(other, DependencySetReport):
            return NotImplemented
        return DependencySetReport(
            total_count=self.total_count + other.total_count,
            summed_loc=self.summed_loc + other.summed_loc,
            count_with_build_script=self.count_with_build_script
            + other.count_with_build_script,
            count_scanned_for_unsafe=self.count_scanned_for_unsafe
            + other.count_scanned_for_unsafe,
            count_forbidding_unsafe=self.count_forbidding_unsafe
            + other.count_forbidding_unsafe,
            count_using_unsafe=self.count_using_unsafe + other.count_using_unsafe,
            summed_used_unsafe_details=self.summed_used_unsafe_details
            + other.summed_used_unsafe_details,
        )

    def to_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "summed_loc": self.summed_loc.to_dict(),
            "count_with_build_script": self.count_with_build_script,
            "count_scanned_for_unsafe": self.count_scanned_for_unsafe,
            "count_forbidding_unsafe": self.count_forbidding_unsafe,
            "count_using_unsafe": self.count_using_unsafe,
            "summed_used_unsafe_details": self.summed_used_unsafe_details.to_dict(),
        }


@dataclass(frozen=True)
class CodeReport:
    """Code-surface report for one dependency."""

    id: PackageId
    is_direct: bool
    has_build_script: bool
    loc: LocReport
    unsafe: Optional[UnsafeUsageReport]
    dependencies: DependencySetReport
    exclusive_dependencies: DependencySetReport

    def to_dict(self) -> dict:
        return {
            "name": self.id.name,
            "version": self.id.version,
            "source": self.id.source,
            "is_direct": self.is_direct,
            "has_build_script": self.has_build_script,
            "loc": self.loc.to_dict(),
            "unsafe": self.unsafe.to_dict() if self.unsafe is not None else None,
            "dependencies": self.dependencies.to_dict(),
            "exclusive_dependencies": self.exclusive_dependencies.to_dict(),
        }
