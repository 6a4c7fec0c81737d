from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..settings import settings
from ..utils import plural_days
from .models import DependencyOption, LineItem, StartType, Timeline, TimelineBar


logger = logging.getLogger(__name__)

_BAR_PALETTE_SIZE = 4
_LABEL_MAX_CHARS = 30


class TimelineError(ValueError):
    pass


def _index(items: Iterable[LineItem]) -> Dict[str, LineItem]:
    # Later rows win on duplicate ids, matching how the editor keys its map.
    return {item.id: item for item in items}


def _start_for(item_id: str, by_id: Dict[str, LineItem]) -> int:
    # Walk the dependency chain until it ends, breaks, or loops back on itself,
    # then accumulate offsets from the far end back to item_id.
    chain: List[LineItem] = []
    visited: set[str] = set()
    current = item_id
    while current not in visited:
        visited.add(current)
        item = by_id.get(current)
        if item is None:
            break
        dep_id = item.dependency_id()
        if dep_id is None or dep_id not in by_id:
            break
        chain.append(item)
        current = dep_id

    # A revisited item on the path counts as starting on day 0.
    start = 0
    for item in reversed(chain):
        dep = by_id[item.dependency_id()]
        if item.start_type == StartType.SEQUENTIAL:
            start += dep.estimated_days
        elif item.start_type == StartType.OVERLAP:
            start += int(math.floor(item.overlap_days or 0))
    return start


def compute_start_offsets(items: List[LineItem]) -> Dict[str, int]:
    """Resolve each item's 0-based start day from its dependency.

    - parallel items, items without a dependency, and items whose dependency
      is not among ``items`` start on day 0
    - sequential items start when their dependency ends
    - overlap items start ``floor(overlap_days)`` after their dependency starts

    Circular references never raise: the walk stops at the first item it sees
    twice and treats that item as starting on day 0.
    """
    by_id = _index(items)
    return {item.id: _start_for(item.id, by_id) for item in items}


def has_cycle(items: List[LineItem], item_id: str) -> bool:
    by_id = _index(items)
    visited: set[str] = set()
    current: Optional[str] = item_id
    while current is not None:
        if current in visited:
            return True
        item = by_id.get(current)
        if item is None:
            return False
        visited.add(current)
        current = item.dependency_id()
    return False


def cyclic_item_ids(items: List[LineItem]) -> List[str]:
    return [item.id for item in items if has_cycle(items, item.id)]


def would_create_cycle(items: List[LineItem], item_id: str, candidate_id: str) -> bool:
    """True if making ``item_id`` depend on ``candidate_id`` closes a loop."""
    by_id = _index(items)
    visited: set[str] = set()
    current: Optional[str] = candidate_id
    while current:
        if current == item_id:
            return True
        if current in visited:
            # Pre-existing loop that does not pass through item_id.
            return False
        visited.add(current)
        dep = by_id.get(current)
        current = dep.dependency_id() if dep is not None else None
    return False


def available_dependencies(items: List[LineItem], item_id: str) -> List[LineItem]:
    return [
        other
        for other in items
        if other.id != item_id and other.is_schedulable() and not would_create_cycle(items, item_id, other.id)
    ]


def selected_choice(item: LineItem) -> str:
    dep_id = item.dependency_id()
    if dep_id is None:
        return StartType.PARALLEL.value
    return f"{item.start_type.value}:{dep_id}"


def dependency_options(items: List[LineItem], item_id: str) -> List[DependencyOption]:
    """Choices for the "Starts" select of one line item."""
    if item_id not in _index(items):
        raise TimelineError(f"Unknown line item: {item_id}")

    options = [DependencyOption(value=StartType.PARALLEL.value, label="Starts Day 1", start_type=StartType.PARALLEL)]
    for other in available_dependencies(items, item_id):
        desc = other.description.strip()
        options.append(
            DependencyOption(
                value=f"{StartType.SEQUENTIAL.value}:{other.id}",
                label=f'After "{desc[:15]}"',
                start_type=StartType.SEQUENTIAL,
                item_id=other.id,
                group=desc[:20],
            )
        )
        options.append(
            DependencyOption(
                value=f"{StartType.OVERLAP.value}:{other.id}",
                label=f'Overlaps "{desc[:12]}"',
                start_type=StartType.OVERLAP,
                item_id=other.id,
                group=desc[:20],
            )
        )
    return options


def parse_dependency_choice(choice: str) -> Tuple[StartType, Optional[str]]:
    raw = (choice or "").strip()
    if raw == StartType.PARALLEL.value:
        return StartType.PARALLEL, None
    kind, sep, dep_id = raw.partition(":")
    if not sep or not dep_id.strip():
        raise TimelineError(f"Invalid dependency choice: {choice!r}")
    try:
        start_type = StartType(kind.strip())
    except ValueError:
        raise TimelineError(f"Invalid dependency choice: {choice!r}")
    if start_type == StartType.PARALLEL:
        raise TimelineError(f"Invalid dependency choice: {choice!r}")
    return start_type, dep_id.strip()


def default_overlap_days(dep: LineItem) -> int:
    return int(math.ceil((dep.estimated_days or 2) / 2))


def link_dependency(
    items: List[LineItem],
    *,
    item_id: str,
    start_type: StartType,
    depends_on: Optional[str] = None,
    overlap_days: Optional[float] = None,
) -> List[LineItem]:
    """Return a copy of ``items`` with ``item_id`` scheduled as requested.

    Raises TimelineError when the target or dependency is unknown, when an
    item would depend on itself, or when the link would close a loop.
    """
    by_id = _index(items)
    if item_id not in by_id:
        raise TimelineError(f"Unknown line item: {item_id}")

    if start_type == StartType.PARALLEL:
        update = {"start_type": StartType.PARALLEL, "depends_on": "", "overlap_days": 0.0}
    else:
        dep_id = (depends_on or "").strip()
        if not dep_id:
            raise TimelineError(f"A {start_type.value} item needs a dependency")
        if dep_id == item_id:
            raise TimelineError("A line item cannot depend on itself")
        dep = by_id.get(dep_id)
        if dep is None:
            raise TimelineError(f"Unknown dependency: {dep_id}")
        if would_create_cycle(items, item_id, dep_id):
            raise TimelineError(f"Circular dependency: {dep_id} already waits on {item_id}")

        if start_type == StartType.OVERLAP:
            days = float(default_overlap_days(dep) if overlap_days is None else max(0.0, float(overlap_days)))
        else:
            days = 0.0
        update = {"start_type": start_type, "depends_on": dep_id, "overlap_days": days}

    return [item.model_copy(update=update) if item.id == item_id else item for item in items]


def _truncate_label(text: str) -> str:
    if len(text) > _LABEL_MAX_CHARS:
        return text[:_LABEL_MAX_CHARS] + "..."
    return text


def build_timeline(
    items: List[LineItem],
    *,
    start_date: Optional[date] = None,
    min_bar_width_percent: Optional[float] = None,
) -> Timeline:
    """Lay out the Gantt chart shown in the proposal's Project Timeline section.

    Only line items with a description take part; a dependency on a blank row
    is treated like a missing one.
    """
    min_width = float(settings.TIMELINE_MIN_BAR_WIDTH_PERCENT if min_bar_width_percent is None else min_bar_width_percent)

    scheduled = [item for item in items if item.is_schedulable()]
    offsets = compute_start_offsets(scheduled)

    max_end = max((offsets[item.id] + item.estimated_days for item in scheduled), default=0)
    total_days = max_end or 1

    loops = cyclic_item_ids(scheduled)
    if loops:
        logger.info("Timeline has circular dependencies, starting them at day 0: %s", loops)

    bars: List[TimelineBar] = []
    for idx, item in enumerate(scheduled):
        start = offsets.get(item.id, 0)
        width = item.estimated_days / total_days * 100.0
        description = item.description.strip()
        bar = TimelineBar(
            item_id=item.id,
            label=_truncate_label(item.description),
            description=description,
            start_day=start,
            end_day=start + item.estimated_days,
            estimated_days=item.estimated_days,
            duration_label=plural_days(item.estimated_days),
            left_percent=round(start / total_days * 100.0, 2),
            width_percent=round(width, 2),
            display_width_percent=round(max(width, min_width), 2),
            color_index=idx % _BAR_PALETTE_SIZE,
        )
        if start_date is not None:
            bar.start_date = start_date + timedelta(days=start)
            bar.end_date = start_date + timedelta(days=start + item.estimated_days - 1)
        bars.append(bar)

    return Timeline(
        total_days=total_days,
        header_labels=["Day 1", f"Day {math.ceil(total_days / 2)}", f"Day {total_days}"],
        bars=bars,
        summary_value=plural_days(total_days),
        cyclic_item_ids=loops,
        start_date=start_date,
        end_date=(start_date + timedelta(days=total_days - 1)) if start_date is not None else None,
    )
