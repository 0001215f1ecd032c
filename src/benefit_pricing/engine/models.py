"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation. Products
arrive from the catalog in their camelCase configuration shape, so every
model can be built from a plain mapping with ``from_dict`` and accepted
either way by the pricing functions via ``coerce``.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Mapping, Optional, Union

from .errors import PricingConfigurationError, UnknownContributionMode


# Product type tags
VOLUNTARY_LIFE = "voluntaryLife"
LONG_TERM_DISABILITY = "longTermDisability"
COMMUTER = "commuter"

PRODUCT_TYPES = (VOLUNTARY_LIFE, LONG_TERM_DISABILITY, COMMUTER)

# Role tags
EMPLOYEE = "ee"
SPOUSE = "sp"
CHILD = "ch"

# Employer contribution mode tags
PERCENTAGE = "percentage"
DOLLAR = "dollar"

CONTRIBUTION_MODE_ALIASES = {
    "percentage": PERCENTAGE,
    "percent": PERCENTAGE,
    "dollar": DOLLAR,
    "dollars": DOLLAR,
    "fixed": DOLLAR,
}

DEFAULT_COST_DIVISOR = 1000.0


def _first(data: Mapping, *keys, default=None):
    """Return the first present key, accepting camelCase or snake_case."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_float(value, label: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise PricingConfigurationError(f"{label} must be a number, got {value!r}") from None


class _Coercible:
    """Mixin accepting either an instance or its mapping form."""

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.from_dict({})
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        raise TypeError(f"Cannot build {cls.__name__} from {type(value).__name__}")


@dataclass(frozen=True)
class RateEntry(_Coercible):
    """A single row of a product's rate table."""
    price: float
    cost_divisor: float = DEFAULT_COST_DIVISOR
    role: Optional[str] = None
    benefit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'RateEntry':
        price = _first(data, "price", "rate")
        if price is None:
            raise PricingConfigurationError(f"Rate entry has no price: {dict(data)}")
        return cls(
            price=_to_float(price, "price"),
            cost_divisor=_to_float(
                _first(data, "costDivisor", "cost_divisor", default=DEFAULT_COST_DIVISOR),
                "costDivisor",
            ),
            role=_first(data, "role"),
            benefit=_first(data, "benefit"),
        )

    def to_dict(self) -> dict:
        out = {"price": self.price, "costDivisor": self.cost_divisor}
        if self.role is not None:
            out["role"] = self.role
        if self.benefit is not None:
            out["benefit"] = self.benefit
        return out


@dataclass(frozen=True)
class PercentageContribution:
    """Employer pays a share of the raw price."""
    value: float
    mode: str = field(default=PERCENTAGE, init=False)

    def amount(self, raw_price: float) -> float:
        return raw_price * (self.value / 100)

    def to_dict(self) -> dict:
        return {"mode": self.mode, "contribution": self.value}


@dataclass(frozen=True)
class FixedDollarContribution:
    """Employer pays a flat dollar amount."""
    value: float
    mode: str = field(default=DOLLAR, init=False)

    def amount(self, raw_price: float) -> float:
        return self.value

    def to_dict(self) -> dict:
        return {"mode": self.mode, "contribution": self.value}


EmployerContribution = Union[PercentageContribution, FixedDollarContribution]


def parse_employer_contribution(data) -> Optional[EmployerContribution]:
    """
    Build a contribution variant from ``{"mode": ..., "contribution": ...}``.

    ``type``/``value`` are accepted as synonyms for ``mode``/``contribution``.
    Returns None when no contribution is configured.
    """
    if data is None or isinstance(data, (PercentageContribution, FixedDollarContribution)):
        return data
    if not isinstance(data, Mapping):
        raise TypeError(f"Cannot build employer contribution from {type(data).__name__}")
    if not data:
        return None

    raw_mode = _first(data, "mode", "type")
    mode = CONTRIBUTION_MODE_ALIASES.get(str(raw_mode).strip().lower()) if raw_mode else None
    if mode is None:
        raise UnknownContributionMode(raw_mode)

    value = _to_float(_first(data, "contribution", "value", default=0), "contribution")
    if mode == PERCENTAGE:
        return PercentageContribution(value)
    return FixedDollarContribution(value)


def parse_costs(data, key_field: str = "role") -> tuple:
    """
    Normalize a rate table.

    Accepts a list of rate entries or a mapping of ``key -> price`` (or
    ``key -> entry``), where key is a role or, for commuter products, a
    benefit.
    """
    if not data:
        return ()
    if isinstance(data, Mapping):
        entries = []
        for key, value in data.items():
            if isinstance(value, Mapping):
                row = dict(value)
                row.setdefault(key_field, key)
            else:
                row = {"price": value, key_field: key}
            entries.append(RateEntry.from_dict(row))
        return tuple(entries)
    return tuple(RateEntry.coerce(entry) for entry in data)


@dataclass(frozen=True)
class Product(_Coercible):
    """A benefit product with its rate table and contribution rule."""
    type: Optional[str]
    costs: tuple = ()
    employer_contribution: Optional[EmployerContribution] = None
    id: Optional[str] = None
    name: Optional[str] = None

    # Long-term disability: share of salary insured, and optional cap
    coverage_percentage: Optional[float] = None
    maximum_coverage: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Product':
        product_type = _first(data, "type")
        key_field = "benefit" if product_type == COMMUTER else "role"
        coverage_percentage = _first(data, "coveragePercentage", "coverage_percentage")
        maximum_coverage = _first(data, "maximumCoverage", "maximum_coverage")
        return cls(
            type=product_type,
            costs=parse_costs(_first(data, "costs", "cost"), key_field=key_field),
            employer_contribution=parse_employer_contribution(
                _first(data, "employerContribution", "employer_contribution")
            ),
            id=_first(data, "id", "product_id"),
            name=_first(data, "name"),
            coverage_percentage=(
                _to_float(coverage_percentage, "coveragePercentage")
                if coverage_percentage is not None else None
            ),
            maximum_coverage=(
                _to_float(maximum_coverage, "maximumCoverage")
                if maximum_coverage is not None else None
            ),
        )

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "costs": [entry.to_dict() for entry in self.costs],
            "employerContribution": (
                self.employer_contribution.to_dict() if self.employer_contribution else None
            ),
        }
        if self.coverage_percentage is not None:
            out["coveragePercentage"] = self.coverage_percentage
        if self.maximum_coverage is not None:
            out["maximumCoverage"] = self.maximum_coverage
        return out


@dataclass(frozen=True)
class Employee(_Coercible):
    """The insured employee. Only salary feeds a price formula."""
    salary: Optional[float] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = EMPLOYEE

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Employee':
        salary = _first(data, "salary")
        return cls(
            salary=_to_float(salary, "salary") if salary is not None else None,
            first_name=_first(data, "firstName", "first_name"),
            last_name=_first(data, "lastName", "last_name"),
            role=_first(data, "role", default=EMPLOYEE),
        )


@dataclass(frozen=True)
class CoverageElection(_Coercible):
    """Elected coverage amount for one covered family member."""
    role: str
    coverage: float

    @classmethod
    def from_dict(cls, data: Mapping) -> 'CoverageElection':
        if "role" not in data:
            raise PricingConfigurationError(f"Coverage level entry has no role: {dict(data)}")
        return cls(
            role=data["role"],
            coverage=_to_float(_first(data, "coverage", default=0), "coverage"),
        )


@dataclass(frozen=True)
class SelectedOptions(_Coercible):
    """The employee's choices for a single product."""
    family_members_to_cover: tuple = ()
    coverage_level: tuple = ()
    benefit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> 'SelectedOptions':
        return cls(
            family_members_to_cover=tuple(
                _first(data, "familyMembersToCover", "family_members_to_cover", default=())
            ),
            coverage_level=parse_coverage_level(
                _first(data, "coverageLevel", "coverage_level", default=())
            ),
            benefit=_first(data, "benefit"),
        )


def parse_coverage_level(data) -> tuple:
    return tuple(CoverageElection.coerce(entry) for entry in data or ())


@dataclass
class QuoteRequest:
    """A pricing request for one catalog product."""
    product_id: str
    employee: Employee
    selected_options: SelectedOptions

    # Optional context, echoed into the trace
    request_date: Optional[str] = None  # ISO date string
    channel: Optional[str] = None  # "portal", "api", "payroll"


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class PriceResult:
    """Complete result of a pricing calculation."""
    product_type: str
    raw_price: float
    employer_contribution: float
    price: float
    product_id: Optional[str] = None
    trace: list[TraceStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this result."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning for this result."""
        self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
