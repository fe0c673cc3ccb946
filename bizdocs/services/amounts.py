"""Tax and amount calculation for business documents.

One calculator serves every document type. The small differences between
document types (whether a line may override the document tax rate, whether
the subtotal itself is rounded) are expressed as a ``CalculatorProfile``
instead of separate copies of the arithmetic.
"""
from dataclasses import dataclass, field
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable


class TaxClass(str, Enum):
    TAXABLE = "taxable"
    NON_TAXABLE = "non-taxable"
    TAX_INCLUDED = "tax-included"


class TaxMode(str, Enum):
    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"


class RoundingPolicy(str, Enum):
    FLOOR = "floor"
    CEIL = "ceil"
    ROUND = "round"


ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
UNIT = Decimal("1")

_ROUNDING_MODES = {
    RoundingPolicy.FLOOR: ROUND_FLOOR,
    RoundingPolicy.CEIL: ROUND_CEILING,
    RoundingPolicy.ROUND: ROUND_HALF_UP,
}


@dataclass(frozen=True)
class LineItem:
    name: str
    quantity: Decimal
    unit_price: Decimal
    tax_class: TaxClass = TaxClass.TAXABLE
    tax_rate: Decimal | None = None
    unit: str | None = None
    remarks: str | None = None

    @property
    def amount(self) -> Decimal:
        return line_amount(self)


@dataclass(frozen=True)
class DocumentTaxSettings:
    tax_mode: TaxMode = TaxMode.EXCLUSIVE
    tax_rate: Decimal = Decimal("10")
    rounding_policy: RoundingPolicy = RoundingPolicy.FLOOR


@dataclass(frozen=True)
class CalculatorProfile:
    per_line_rate_override: bool = True
    round_subtotal: bool = False


@dataclass(frozen=True)
class CalculatedAmounts:
    subtotal: Decimal = ZERO
    tax_amount_by_rate: dict[Decimal, Decimal] = field(default_factory=dict)
    tax_amount: Decimal = ZERO
    total_amount: Decimal = ZERO

    @property
    def tax_amount_8(self) -> Decimal:
        return self.tax_amount_by_rate.get(Decimal("8"), ZERO)

    @property
    def tax_amount_10(self) -> Decimal:
        return self.tax_amount_by_rate.get(Decimal("10"), ZERO)

    def breakdown(self) -> dict[str, str]:
        """Buckets keyed by a printable rate, suitable for a JSON column."""
        return {
            rate_label(rate): str(amount)
            for rate, amount in sorted(self.tax_amount_by_rate.items())
        }


DEFAULT_PROFILE = CalculatorProfile()

PROFILES: dict[str, CalculatorProfile] = {
    "estimate": CalculatorProfile(per_line_rate_override=False),
    "invoice": CalculatorProfile(),
    "purchase_order": CalculatorProfile(round_subtotal=True),
    "delivery_note": CalculatorProfile(),
}


def profile_for(document_type: str) -> CalculatorProfile:
    return PROFILES.get(document_type, DEFAULT_PROFILE)


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def rate_label(rate: Decimal) -> str:
    if rate == rate.to_integral_value():
        return str(int(rate))
    return format(rate.normalize(), "f")


def round_amount(value: Decimal, policy: RoundingPolicy) -> Decimal:
    """Round to a whole currency unit using the document's rounding policy."""
    mode = _ROUNDING_MODES[RoundingPolicy(policy)]
    return to_decimal(value).quantize(UNIT, rounding=mode)


def line_amount(item: LineItem) -> Decimal:
    return to_decimal(item.quantity) * to_decimal(item.unit_price)


def _effective_rate(
    item: LineItem, settings: DocumentTaxSettings, profile: CalculatorProfile
) -> Decimal:
    if profile.per_line_rate_override and item.tax_rate is not None:
        return to_decimal(item.tax_rate)
    return to_decimal(settings.tax_rate)


def _split(
    item: LineItem, settings: DocumentTaxSettings, profile: CalculatorProfile
) -> tuple[Decimal, Decimal, Decimal | None]:
    """Return ``(base, tax, rate)`` for one line; rate is None when untaxed."""
    amount = line_amount(item)
    tax_class = TaxClass(item.tax_class)
    if tax_class is TaxClass.NON_TAXABLE:
        return amount, ZERO, None

    rate = _effective_rate(item, settings, profile)
    included = tax_class is TaxClass.TAX_INCLUDED or (
        TaxMode(settings.tax_mode) is TaxMode.INCLUSIVE
    )
    if included:
        base = amount / (1 + rate / HUNDRED)
        return base, amount - base, rate
    return amount, amount * rate / HUNDRED, rate


def calculate_amounts(
    items: Iterable[LineItem],
    settings: DocumentTaxSettings,
    profile: CalculatorProfile = DEFAULT_PROFILE,
) -> CalculatedAmounts:
    policy = RoundingPolicy(settings.rounding_policy)
    base_total = ZERO
    gross_total = ZERO
    raw_buckets: dict[Decimal, Decimal] = {}

    for item in items:
        base, tax, rate = _split(item, settings, profile)
        base_total += base
        gross_total += line_amount(item)
        if rate is not None:
            raw_buckets[rate] = raw_buckets.get(rate, ZERO) + tax

    # Rounding applies to each aggregated bucket, never to individual lines.
    buckets = {rate: round_amount(tax, policy) for rate, tax in raw_buckets.items()}
    tax_amount = sum(buckets.values(), ZERO)

    if TaxMode(settings.tax_mode) is TaxMode.INCLUSIVE:
        if profile.round_subtotal:
            total = round_amount(gross_total, policy)
        else:
            total = gross_total.quantize(CENT, rounding=ROUND_HALF_UP)
        subtotal = total - tax_amount
    else:
        if profile.round_subtotal:
            subtotal = round_amount(base_total, policy)
        else:
            subtotal = base_total.quantize(CENT, rounding=ROUND_HALF_UP)
        total = subtotal + tax_amount

    return CalculatedAmounts(
        subtotal=subtotal,
        tax_amount_by_rate=buckets,
        tax_amount=tax_amount,
        total_amount=total,
    )
