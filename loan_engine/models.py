"""
Domain Models for the Loan Sizer Engine

These dataclasses provide type-safe representations of all loan sizing entities.
All monetary values and percentages use Decimal for precision.
"""

from dataclasses import asdict, dataclass, field
from decimal import Decimal

# =============================================================================
# ENUMERATED VALUES
# =============================================================================

TRANSACTION_TYPES = ("Purchase", "Refinance", "Cash-Out Refinance")

BEGINNER = "Beginner"
INTERMEDIATE = "Intermediate"
EXPERIENCED = "Experienced"
PROFESSIONAL = "Professional"
EXPERIENCE_LEVELS = (BEGINNER, INTERMEDIATE, EXPERIENCED, PROFESSIONAL)

APPROVED = "Approved"
PENDING_REVIEW = "Pending Review"


def _decimal(value) -> Decimal:
    return Decimal(str(value))


def _whole_number(name: str, value) -> int:
    number = _decimal(value)
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"{name} must be a whole number, got: {value}")
    return int(number)


def _pick(data: dict, snake: str, camel: str, default=None):
    """Read a key in snake_case, falling back to the camelCase form used by the web form."""
    if snake in data:
        return data[snake]
    return data.get(camel, default)


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class DealInput:
    """A single loan sizing request. Never mutated after creation."""

    address: str
    transaction_type: str
    purchase_price: Decimal
    rehab_budget: Decimal
    arv: Decimal
    borrower_fico: int
    borrower_experience: str
    borrower_name: str | None = None
    borrower_email: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DealInput":
        return cls(
            address=str(data["address"]).strip(),
            transaction_type=_pick(data, "transaction_type", "transactionType"),
            purchase_price=_decimal(_pick(data, "purchase_price", "purchasePrice")),
            rehab_budget=_decimal(_pick(data, "rehab_budget", "rehabBudget", 0)),
            arv=_decimal(data["arv"]),
            borrower_fico=int(_decimal(_pick(data, "borrower_fico", "borrowerFico"))),
            borrower_experience=_pick(data, "borrower_experience", "borrowerExperience"),
            borrower_name=_pick(data, "borrower_name", "borrowerName"),
            borrower_email=_pick(data, "borrower_email", "borrowerEmail"),
        )


@dataclass(frozen=True)
class RateTable:
    """Admin-configurable pricing table. Replaced as a whole, never edited in place.

    All values are percentages (8.5 means 8.5%).
    """

    base_interest_rate: Decimal = Decimal("8.5")
    fico_discount_750: Decimal = Decimal("1.5")
    fico_discount_700: Decimal = Decimal("1.0")
    fico_discount_650: Decimal = Decimal("0.5")
    experience_discount_professional: Decimal = Decimal("0.5")
    experience_discount_experienced: Decimal = Decimal("0.25")
    min_interest_rate: Decimal = Decimal("6.0")
    ltv_beginner: Decimal = Decimal("70")
    ltv_intermediate: Decimal = Decimal("75")
    ltv_experienced: Decimal = Decimal("80")
    ltv_professional: Decimal = Decimal("85")
    closing_costs_percentage: Decimal = Decimal("3.0")
    origination_fee_percentage: Decimal = Decimal("1.0")

    @property
    def fico_discounts(self) -> tuple[tuple[int, Decimal], ...]:
        """Ordered (threshold, discount) pairs, highest threshold first."""
        return (
            (750, self.fico_discount_750),
            (700, self.fico_discount_700),
            (650, self.fico_discount_650),
        )

    @property
    def experience_discounts(self) -> dict[str, Decimal]:
        return {
            PROFESSIONAL: self.experience_discount_professional,
            EXPERIENCED: self.experience_discount_experienced,
        }

    @property
    def ltv_by_experience(self) -> dict[str, Decimal]:
        return {
            BEGINNER: self.ltv_beginner,
            INTERMEDIATE: self.ltv_intermediate,
            EXPERIENCED: self.ltv_experienced,
            PROFESSIONAL: self.ltv_professional,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RateTable":
        """Build a full table. Missing keys keep their default values."""
        defaults = cls()
        return cls(**{
            name: _decimal(data.get(name, getattr(defaults, name)))
            for name in cls.__dataclass_fields__
        })

    def to_dict(self) -> dict:
        return {name: float(value) for name, value in asdict(self).items()}


@dataclass(frozen=True)
class ValidationRules:
    """Admin-configurable approval rules. Replaced as a whole."""

    min_fico: int = 650
    max_rehab_budget_percentage: Decimal = Decimal("50")
    min_arv_to_purchase_ratio: Decimal = Decimal("1.2")

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationRules":
        defaults = cls()
        return cls(
            min_fico=_whole_number("min_fico", data.get("min_fico", defaults.min_fico)),
            max_rehab_budget_percentage=_decimal(
                data.get("max_rehab_budget_percentage", defaults.max_rehab_budget_percentage)
            ),
            min_arv_to_purchase_ratio=_decimal(
                data.get("min_arv_to_purchase_ratio", defaults.min_arv_to_purchase_ratio)
            ),
        )

    def to_dict(self) -> dict:
        return {
            "min_fico": self.min_fico,
            "max_rehab_budget_percentage": float(self.max_rehab_budget_percentage),
            "min_arv_to_purchase_ratio": float(self.min_arv_to_purchase_ratio),
        }


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class LoanTerms:
    """Computed loan terms. Money rounded to whole units, rate to 2 places."""

    max_loan_amount: Decimal
    interest_rate: Decimal
    ltv: Decimal
    down_payment: Decimal
    closing_costs: Decimal
    origination_fee: Decimal
    monthly_payment: Decimal
    total_project_cost: Decimal
    approval_status: str

    @property
    def total_closing_costs(self) -> Decimal:
        return self.origination_fee + self.closing_costs

    @property
    def is_approved(self) -> bool:
        return self.approval_status == APPROVED


@dataclass
class ProcessingContext:
    """
    Holds all intermediate (unrounded) values during term computation.
    This is the "bag" that flows through the calculators.
    """

    # Input (immutable during processing)
    deal: DealInput
    rates: RateTable
    rules: ValidationRules

    # Step results (populated as we go)
    ltv: Decimal = Decimal("0")
    max_loan_amount: Decimal = Decimal("0")
    interest_rate: Decimal = Decimal("0")
    closing_costs: Decimal = Decimal("0")
    origination_fee: Decimal = Decimal("0")
    total_project_cost: Decimal = Decimal("0")
    down_payment: Decimal = Decimal("0")
    monthly_payment: Decimal = Decimal("0")
    approval_status: str = PENDING_REVIEW


@dataclass
class SizingResult:
    """Outcome of one sizing request: terms, or the list of reasons there are none."""

    status: str  # 'calculated', 'invalid_input' or 'validation_failed'
    deal: DealInput | None = None
    terms: LoanTerms | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.terms is not None
