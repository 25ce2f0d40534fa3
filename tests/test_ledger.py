"""Tests for the daily ledger."""

import itertools
from datetime import timedelta
from uuid import uuid4

import pytest

from macro_ledger.domain.nutrition import Macro, MacroSet
from macro_ledger.errors import NotFoundError
from macro_ledger.services.ledger import DailyLedgerService, build_summary
from tests.conftest import (
    TODAY,
    InMemoryMealRepository,
    InMemoryProfileRepository,
    make_meal,
    make_targets,
)


def _ledger() -> tuple[DailyLedgerService, InMemoryProfileRepository]:
    profiles = InMemoryProfileRepository()
    ledger = DailyLedgerService(meals=InMemoryMealRepository(), targets=profiles)
    return ledger, profiles


def test_append_meal_updates_totals_and_flags() -> None:
    ledger, profiles = _ledger()
    user_id = uuid4()
    profiles.targets[user_id] = make_targets(protein_g=50, carbs_g=250, fat_g=20)

    ledger.append_meal(user_id, make_meal(user_id, 30, 40, 10))
    summary = ledger.append_meal(user_id, make_meal(user_id, 25, 60, 12))

    assert summary.meal_count == 2
    assert summary.totals.protein_g == 55
    assert summary.totals.carbs_g == 100
    assert summary.totals.fat_g == 22
    assert summary.totals.calories == 55 * 4 + 100 * 4 + 22 * 9
    assert summary.targets_met[Macro.PROTEIN] is True
    assert summary.targets_met[Macro.CARBS] is False
    assert summary.targets_met[Macro.FATS] is True
    assert summary.targets_met[Macro.CALORIES] is False


def test_append_then_remove_restores_prior_summary() -> None:
    ledger, profiles = _ledger()
    user_id = uuid4()
    profiles.targets[user_id] = make_targets()
    ledger.append_meal(user_id, make_meal(user_id, 20.1, 33.3, 7.7))
    before = ledger.append_meal(user_id, make_meal(user_id, 10.2, 5.5, 0.3))

    extra = make_meal(user_id, 41.7, 12.9, 19.1)
    ledger.append_meal(user_id, extra)
    after = ledger.remove_meal(user_id, extra.id)

    assert after == before


def test_totals_do_not_depend_on_append_order() -> None:
    user_id = uuid4()
    targets = make_targets()
    meals = [
        make_meal(user_id, 0.1, 10.7, 3.3),
        make_meal(user_id, 0.2, 20.9, 1.1),
        make_meal(user_id, 0.3, 30.3, 2.7),
        make_meal(user_id, 33.3, 0.7, 0.01),
    ]
    summaries = []
    for order in itertools.permutations(meals):
        ledger, profiles = _ledger()
        profiles.targets[user_id] = targets
        for meal in order:
            summary = ledger.append_meal(user_id, meal)
        summaries.append(summary)

    assert all(summary == summaries[0] for summary in summaries)
    assert summaries[0].totals.protein_g == pytest.approx(33.9)


def test_remove_meal_of_other_user_raises_not_found() -> None:
    ledger, _ = _ledger()
    owner = uuid4()
    intruder = uuid4()
    meal = make_meal(owner, 30, 40, 10)
    ledger.append_meal(owner, meal)

    with pytest.raises(NotFoundError):
        ledger.remove_meal(intruder, meal.id)

    assert ledger.get_summary(owner, TODAY).meal_count == 1


def test_remove_unknown_meal_raises_not_found() -> None:
    ledger, _ = _ledger()

    with pytest.raises(NotFoundError) as exc_info:
        ledger.remove_meal(uuid4(), uuid4())

    assert exc_info.value.status_code == 404


def test_summary_reflects_current_targets() -> None:
    ledger, profiles = _ledger()
    user_id = uuid4()
    profiles.targets[user_id] = make_targets(protein_g=100)
    summary = ledger.append_meal(user_id, make_meal(user_id, 90, 10, 5))
    assert summary.targets_met[Macro.PROTEIN] is False

    profiles.targets[user_id] = make_targets(protein_g=80)

    assert ledger.get_summary(user_id, TODAY).targets_met[Macro.PROTEIN] is True


def test_days_are_kept_apart() -> None:
    ledger, _ = _ledger()
    user_id = uuid4()
    ledger.append_meal(user_id, make_meal(user_id, 10, 10, 10))
    yesterday = TODAY - timedelta(days=1)
    ledger.append_meal(user_id, make_meal(user_id, 5, 5, 5, day=yesterday))

    assert ledger.get_summary(user_id, TODAY).totals.protein_g == 10
    assert len(ledger.list_meals(user_id, TODAY)) == 1


def test_summary_without_targets_marks_nothing_met() -> None:
    user_id = uuid4()

    summary = build_summary(user_id, TODAY, [make_meal(user_id, 500, 500, 500)], None)

    assert not any(summary.targets_met.values())
    assert summary.meal_count == 1


def test_recompute_stores_summary(meal_repository, ledger) -> None:
    user_id = uuid4()

    ledger.append_meal(user_id, make_meal(user_id, 10, 20, 5))

    stored = meal_repository.get_summary(user_id, TODAY)
    assert stored is not None
    assert stored.totals.carbs_g == 20


def test_get_summary_reads_stored_summary_without_rewriting() -> None:
    repository = InMemoryMealRepository()
    profiles = InMemoryProfileRepository()
    ledger = DailyLedgerService(meals=repository, targets=profiles)
    user_id = uuid4()
    stored = build_summary(user_id, TODAY, [make_meal(user_id, 90, 10, 5)], None)
    repository.summaries[(user_id, TODAY)] = stored
    profiles.targets[user_id] = make_targets(protein_g=80)

    summary = ledger.get_summary(user_id, TODAY)

    assert summary.totals == MacroSet(protein_g=90, carbs_g=10, fat_g=5)
    assert summary.targets_met[Macro.PROTEIN] is True
    assert repository.summaries[(user_id, TODAY)] is stored


def test_get_summary_materializes_missing_day(meal_repository, ledger) -> None:
    user_id = uuid4()

    summary = ledger.get_summary(user_id, TODAY)

    assert summary.meal_count == 0
    assert meal_repository.summaries[(user_id, TODAY)] == summary
