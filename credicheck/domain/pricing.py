"""Report pricing - per-bureau unit prices summed over a bureau selection"""

from typing import Iterable, List

from credicheck.domain.exceptions import EmptyBureauSelectionError
from credicheck.domain.models import Bureau, PricingTable, RequesterClass


def normalize_bureaus(bureaus: Iterable[Bureau]) -> List[Bureau]:
    """Drop duplicates, keep request order"""
    selection: List[Bureau] = []
    for bureau in bureaus:
        if bureau not in selection:
            selection.append(bureau)
    if not selection:
        raise EmptyBureauSelectionError("At least one bureau must be selected")
    return selection


def quote(pricing: PricingTable, requester_class: RequesterClass, bureaus: Iterable[Bureau]) -> int:
    """
    Total price for a bureau selection at the requester's rate.

    Every Bureau member is present in both schedules, so a KeyError here
    means the pricing table itself is malformed.
    """
    schedule = pricing.schedule_for(requester_class)
    return sum(schedule[bureau] for bureau in normalize_bureaus(bureaus))
