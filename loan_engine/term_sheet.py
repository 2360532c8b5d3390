"""
Term Sheet Document

Merges the deal input and computed terms into one record and lays it out as
a term sheet. The record's field set is what downstream renderers rely on.
"""

import re
from dataclasses import asdict, dataclass, field
from datetime import datetime

from .models import DealInput, LoanTerms


def _money(value) -> str:
    if value < 0:
        return f"-${-value:,.0f}"
    return f"${value:,.0f}"


@dataclass(frozen=True)
class TermSheetRecord:
    """Deal input and loan terms merged into one flat record."""

    address: str
    transaction_type: str
    purchase_price: float
    rehab_budget: float
    arv: float
    borrower_fico: int
    borrower_experience: str
    max_loan_amount: float
    interest_rate: float
    ltv: float
    down_payment: float
    closing_costs: float
    origination_fee: float
    monthly_payment: float
    total_project_cost: float
    approval_status: str
    borrower_name: str | None = None
    borrower_email: str | None = None

    @classmethod
    def merge(cls, deal: DealInput, terms: LoanTerms) -> "TermSheetRecord":
        return cls(
            address=deal.address,
            transaction_type=deal.transaction_type,
            purchase_price=float(deal.purchase_price),
            rehab_budget=float(deal.rehab_budget),
            arv=float(deal.arv),
            borrower_fico=deal.borrower_fico,
            borrower_experience=deal.borrower_experience,
            max_loan_amount=float(terms.max_loan_amount),
            interest_rate=float(terms.interest_rate),
            ltv=float(terms.ltv),
            down_payment=float(terms.down_payment),
            closing_costs=float(terms.closing_costs),
            origination_fee=float(terms.origination_fee),
            monthly_payment=float(terms.monthly_payment),
            total_project_cost=float(terms.total_project_cost),
            approval_status=terms.approval_status,
            borrower_name=deal.borrower_name,
            borrower_email=deal.borrower_email,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TermSheetSection:
    title: str
    lines: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class TermSheetDocument:
    """A laid-out term sheet, ready to export."""

    record: TermSheetRecord
    generated_at: datetime
    sections: list[TermSheetSection]
    title: str = "LOAN TERM SHEET"

    @property
    def filename(self) -> str:
        slug = re.sub(r"[^a-zA-Z0-9]", "-", self.record.address)
        stamp = int(self.generated_at.timestamp() * 1000)
        return f"term-sheet-{slug}-{stamp}.txt"

    def render_text(self) -> str:
        width = 60
        out = [self.title.center(width).rstrip(), ""]
        out.append(f"Generated on: {self.generated_at.strftime('%m/%d/%Y')}")
        for section in self.sections:
            out.append("")
            out.append(section.title)
            out.append("-" * len(section.title))
            for label, value in section.lines:
                out.append(f"{label}: {value}")
        return "\n".join(out) + "\n"

    def to_bytes(self) -> bytes:
        return self.render_text().encode("utf-8")


def produce_document(terms: LoanTerms, deal: DealInput, generated_at: datetime | None = None) -> TermSheetDocument:
    """Lay out the merged deal + terms record as a term sheet."""
    record = TermSheetRecord.merge(deal, terms)
    borrower_lines = [
        ("FICO Score", str(record.borrower_fico)),
        ("Experience Level", record.borrower_experience),
    ]
    if record.borrower_name:
        borrower_lines.insert(0, ("Borrower Name", record.borrower_name))

    sections = [
        TermSheetSection("Property Information", [
            ("Address", record.address),
            ("Transaction Type", record.transaction_type),
            ("Purchase Price", _money(record.purchase_price)),
            ("Rehab Budget", _money(record.rehab_budget)),
            ("ARV", _money(record.arv)),
        ]),
        TermSheetSection("Borrower Information", borrower_lines),
        TermSheetSection("Loan Terms", [
            ("Maximum Loan Amount", _money(record.max_loan_amount)),
            ("Interest Rate", f"{record.interest_rate:g}%"),
            ("LTV Ratio", f"{record.ltv:g}%"),
            ("Down Payment", _money(record.down_payment)),
            ("Monthly Payment", _money(record.monthly_payment)),
        ]),
        TermSheetSection("Closing Costs Breakdown", [
            ("Origination Fee", _money(record.origination_fee)),
            ("Other Closing Costs", _money(record.closing_costs)),
            ("Total Closing Costs", _money(record.origination_fee + record.closing_costs)),
        ]),
        TermSheetSection("Status", [
            ("Approval Status", record.approval_status),
        ]),
    ]
    return TermSheetDocument(
        record=record,
        generated_at=generated_at or datetime.now(),
        sections=sections,
    )
