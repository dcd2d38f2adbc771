"""
Weekday suggestions for new recurring allocations.

Given a promoter's availability and the weekdays already claimed by the
promoter's other active allocations at the same store, propose the days a
new allocation should use:

1. prefer days that are available and not claimed by another brand;
2. top up from available-but-claimed days when the free ones run out;
3. never suggest a day outside the promoter's availability.

Picks inside each group are spread across the week by fixed-step index
sampling (see ``distribute_days_evenly``) rather than taken as a prefix.

Weekdays are integers, 0 = Sunday .. 6 = Saturday. Everything here is pure;
reading promoters and allocations from the database lives in
``fieldops.allocations.services``.
"""
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple


class DaySet(tuple):
    """Immutable ascending sequence of unique weekday integers"""

    def __new__(cls, days: Iterable[int] = ()):
        return super().__new__(cls, sorted(set(days)))

    def union(self, other: Iterable[int]) -> 'DaySet':
        return DaySet(set(self) | set(other))

    def difference(self, other: Iterable[int]) -> 'DaySet':
        excluded = set(other)
        return DaySet(day for day in self if day not in excluded)

    def intersection(self, other: Iterable[int]) -> 'DaySet':
        kept = set(other)
        return DaySet(day for day in self if day in kept)

    def __repr__(self):
        return f"DaySet({list(self)})"


@dataclass(frozen=True)
class ConflictingAllocation:
    """Another active allocation of the same promoter at the same store"""
    brand_id: int
    brand_name: str
    days: Tuple[int, ...] = ()

    def as_dict(self):
        return {
            'brand_id': self.brand_id,
            'brand_name': self.brand_name,
            'days': list(self.days),
        }


@dataclass(frozen=True)
class DaySuggestion:
    suggested_days: DaySet
    available_days: DaySet
    conflicting_allocations: Tuple[ConflictingAllocation, ...] = field(default_factory=tuple)

    def as_dict(self):
        """JSON shape returned by the suggestions endpoint"""
        return {
            'suggestedDays': list(self.suggested_days),
            'availableDays': list(self.available_days),
            'conflictingAllocations': [alloc.as_dict() for alloc in self.conflicting_allocations],
        }


def distribute_days_evenly(days: Sequence[int], count: int) -> DaySet:
    """
    Pick ``count`` entries of ``days`` spread across the list.

    Entry ``floor(i * len(days) / count)`` is taken for each ``i`` in
    ``0..count-1``, so 2 of [1, 2, 3, 4, 5] gives [1, 3] rather than [1, 2].
    When ``count`` covers the whole list every day is returned.
    """
    days = list(days)
    if count >= len(days):
        return DaySet(days)
    if count <= 0:
        return DaySet()

    step = len(days) / count
    return DaySet(days[math.floor(i * step)] for i in range(count))


def suggest_days(
    available_days: Optional[Iterable[int]],
    conflicting_allocations: Iterable[ConflictingAllocation],
    frequency_per_week: int,
    default_days: Iterable[int] = (),
) -> DaySuggestion:
    """
    Suggest ``frequency_per_week`` weekdays for a new allocation.

    ``available_days`` is None when the promoter never declared availability,
    in which case ``default_days`` is used instead. The result holds fewer
    days than requested only when the availability itself is too small.
    """
    available = DaySet(default_days if available_days is None else available_days)
    conflicts = tuple(conflicting_allocations)

    claimed = DaySet()
    for alloc in conflicts:
        claimed = claimed.union(alloc.days)

    free = available.difference(claimed)
    busy = available.intersection(claimed)

    if len(free) >= frequency_per_week:
        selected: List[int] = list(distribute_days_evenly(free, frequency_per_week))
    else:
        selected = list(free)
        remaining = frequency_per_week - len(free)
        if remaining > 0 and busy:
            selected.extend(distribute_days_evenly(busy, remaining))

    if len(selected) < frequency_per_week:
        needed = frequency_per_week - len(selected)
        leftovers = [day for day in available if day not in selected]
        selected.extend(leftovers[:needed])

    suggested = DaySet(selected)[:max(frequency_per_week, 0)]
    return DaySuggestion(
        suggested_days=DaySet(suggested),
        available_days=available,
        conflicting_allocations=conflicts,
    )
