from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

PAISE = Decimal("0.01")


def to_money(value: Decimal) -> Decimal:
    """Round a rupee amount to whole paise: Decimal('12.345') -> Decimal('12.35')"""
    return value.quantize(PAISE, rounding=ROUND_HALF_UP)


def format_inr(amount: Decimal, symbol: str = "₹") -> str:
    """Format rupees with Indian digit grouping: 1234567.5 -> '₹ 12,34,567.50'"""
    value = to_money(Decimal(amount))
    sign = "-" if value < 0 else ""
    whole, frac = f"{abs(value):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])
    return f"{sign}{symbol} {whole}.{frac}"


def parse_amount(text: str) -> Decimal | None:
    """Parse user input like '1,250.50' or '₹ 300' into a Decimal. None if invalid."""
    cleaned = text.strip().replace("₹", "").replace(",", "").strip()
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
