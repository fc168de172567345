import logging
from typing import Iterable

from engine.dates import StayLike, day_before, load_stays
from engine.errors import describe_date
from models.schemas import Stay, StayCorrection

logger = logging.getLogger(__name__)


def _entry_order(stays: list[Stay]) -> list[int]:
    # sorted() is stable, so equal entry dates keep the caller's order
    return sorted(range(len(stays)), key=lambda i: stays[i].entry_date)


def _close(stay: Stay, exit_date) -> Stay:
    logger.debug(
        "Closing stay %s (%s, entered %s) on %s",
        stay.id,
        stay.country_code,
        stay.entry_date.isoformat(),
        describe_date(exit_date),
    )
    return stay.model_copy(update={"exit_date": exit_date})


def _with_provenance(stay: Stay, departed: Stay) -> Stay:
    if stay.from_country_code:
        return stay
    return stay.model_copy(update={"from_country_code": departed.country_code, "from_city": departed.city})


def _reconcile(stays: list[Stay]) -> list[Stay]:
    result = list(stays)
    if len(result) <= 1:
        return result
    order = _entry_order(result)

    # Every open stay except the last one in entry order ends where its
    # successor begins: on that day for a different country (same-day
    # hand-off), the day before for a same-country continuation.
    for pos in range(len(order) - 1):
        idx, next_idx = order[pos], order[pos + 1]
        current = result[idx]
        if not current.is_open:
            continue
        successor = result[next_idx]
        if successor.country_code != current.country_code:
            result[idx] = _close(current, successor.entry_date)
            result[next_idx] = _with_provenance(successor, current)
        elif successor.entry_date > current.entry_date:
            result[idx] = _close(current, day_before(successor.entry_date))
        else:
            result[idx] = _close(current, current.entry_date)
    return result


def reconcile_all(stays: Iterable[StayLike]) -> list[Stay]:
    """
    Correct a stay collection so that at most one stay is open and every
    different-country hand-off happens on a shared boundary day.

    Only exit_date and the from_* provenance fields are ever changed. The
    result keeps the caller's order and length; inputs are never mutated.
    Running it on its own output changes nothing.
    """
    return _reconcile(load_stays(stays))


def reconcile_insert(stays: Iterable[StayLike], new_stay: StayLike) -> list[Stay]:
    """
    Add new_stay to an existing collection and reconcile around it. An existing
    stay with the same id is replaced. The new stay is returned last.
    """
    existing = load_stays(stays)
    (incoming,) = load_stays([new_stay])
    merged = [stay for stay in existing if stay.id != incoming.id]
    merged.append(incoming)
    return _reconcile(merged)


def find_unresolved_overlaps(stays: Iterable[StayLike]) -> list[tuple[Stay, Stay]]:
    """
    Pairs of neighbouring stays (in entry order) where the earlier one is still
    open although a different country was entered later.
    """
    loaded = load_stays(stays)
    ordered = [loaded[i] for i in _entry_order(loaded)]
    pairs = []
    for current, successor in zip(ordered, ordered[1:]):
        if (
            current.is_open
            and successor.country_code != current.country_code
            and successor.entry_date > current.entry_date
        ):
            pairs.append((current, successor))
    return pairs


def has_unresolved_overlaps(stays: Iterable[StayLike]) -> bool:
    return bool(find_unresolved_overlaps(stays))


def diff_corrections(before: Iterable[StayLike], after: Iterable[StayLike]) -> list[StayCorrection]:
    """
    Compare a collection with its reconciled form and list the stays whose
    exit_date or provenance changed. Stays missing from `before` are skipped;
    they need an insert, not an update.
    """
    original = {stay.id: stay for stay in load_stays(before)}
    corrections: list[StayCorrection] = []
    for stay in load_stays(after):
        prior = original.get(stay.id)
        if prior is None:
            continue
        if (
            prior.exit_date != stay.exit_date
            or prior.from_country_code != stay.from_country_code
            or prior.from_city != stay.from_city
        ):
            corrections.append(
                StayCorrection(
                    id=stay.id,
                    exit_date=stay.exit_date,
                    from_country_code=stay.from_country_code,
                    from_city=stay.from_city,
                )
            )
    return corrections


def remove_duplicate_stays(stays: Iterable[StayLike]) -> list[Stay]:
    """
    Drop stays that repeat an earlier stay's country, dates, city and
    provenance. Visa type and notes are not compared, so a re-entered copy of
    the same trip counts as a duplicate.
    """
    seen: set[tuple] = set()
    unique: list[Stay] = []
    for stay in load_stays(stays):
        key = (
            stay.country_code,
            stay.entry_date,
            stay.exit_date,
            stay.city,
            stay.from_country_code,
            stay.from_city,
        )
        if key in seen:
            logger.debug("Dropping duplicate stay %s", stay.id)
            continue
        seen.add(key)
        unique.append(stay)
    return unique
