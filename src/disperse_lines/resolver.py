"""Conflict resolvers — rewrite text so each identifier appears once.

Both drop malformed lines (fewer than 2 fields) and keep identifiers in
first-seen order.  Neither re-validates; callers run ``validate`` again on
the returned text.
"""

from __future__ import annotations
from decimal import Decimal, Inexact, localcontext

from .logging_setup import get_logger
from .patterns import parse_amount, split_lines

logger = get_logger(__name__)

MERGE_DELIMITER = "="


def keep_first(text: str) -> str:
    """Keep only the first line for each identifier, verbatim."""
    seen: set[str] = set()
    kept: list[str] = []
    for line in split_lines(text):
        if not line.is_entry:
            continue
        identifier = line.fields[0]
        if identifier in seen:
            continue
        seen.add(identifier)
        kept.append(line.raw)

    logger.debug("keep_first: kept %d distinct identifiers", len(kept))
    return "\n".join(kept)


def merge_amounts(text: str, *, delimiter: str = MERGE_DELIMITER) -> str:
    """Collapse duplicates into ``identifier=sum`` lines.

    Unparsable amounts count as zero rather than poisoning the sum.
    """
    amounts: list[tuple[str, Decimal]] = []
    for line in split_lines(text):
        if not line.is_entry:
            continue
        identifier, amount_text = line.fields[0], line.fields[1]
        amount = parse_amount(amount_text)
        if amount is None:
            logger.debug("merge_amounts: line %d amount %r counted as 0", line.number, amount_text)
            amount = Decimal(0)
        amounts.append((identifier, amount))

    totals: dict[str, Decimal] = {}
    # Wide enough that no sum of these inputs can round
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _sum_precision([a for _, a in amounts]))
        ctx.traps[Inexact] = True
        for identifier, amount in amounts:
            totals[identifier] = totals.get(identifier, Decimal(0)) + amount

    logger.debug("merge_amounts: merged into %d identifiers", len(totals))
    return "\n".join(
        f"{identifier}{delimiter}{format_amount(total)}"
        for identifier, total in totals.items()
    )


def _sum_precision(amounts: list[Decimal]) -> int:
    """Digits needed to hold any sum of ``amounts`` exactly."""
    int_digits = frac_digits = 1
    for a in amounts:
        t = a.as_tuple()
        int_digits = max(int_digits, len(t.digits) + t.exponent)
        frac_digits = max(frac_digits, -t.exponent)
    # Carries from n addends add at most len(str(n)) digits
    return int_digits + frac_digits + len(str(len(amounts)))


def format_amount(value: Decimal) -> str:
    """Render without exponent or trailing zeros: ``Decimal("4.0")`` → ``"4"``."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        return format(value.normalize(), "f")


POLICIES = {
    "keep-first": keep_first,
    "merge": merge_amounts,
}


def resolve(text: str, policy: str = "keep-first") -> str:
    """Apply a named duplicate policy (``keep-first`` or ``merge``)."""
    try:
        fn = POLICIES[policy]
    except KeyError:
        raise ValueError(f"unknown duplicate policy {policy!r}; expected one of {sorted(POLICIES)}") from None
    return fn(text)
