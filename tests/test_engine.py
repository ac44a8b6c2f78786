"""Tests for DistributionEngine.calculate."""

from dataclasses import asdict
from datetime import date
from decimal import Decimal
from uuid import uuid4

from distribution_engine.calculators.intervals import DateRange
from distribution_engine.calculators.types import (
    CalculationFilters,
    ContractStatus,
    DataMode,
    RecordKind,
)
from tests.factories import make_allocation, make_profile, make_project, make_record

JANUARY = DateRange(date(2025, 1, 1), date(2025, 1, 31))


class TestCalculate:
    """End-to-end calculation over in-memory snapshots."""

    def test_split_scenario_result_shape(self, engine, split_scenario):
        s = split_scenario
        result = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, DataMode.ACTUAL
        )

        assert result.engine_version == "test-1"
        assert result.data_mode == DataMode.ACTUAL
        assert len(result.profiles) == 1

        profile = result.profiles[0]
        assert profile.profile == "Ana Torres"
        assert [m.month for m in profile.months] == ["2025-01"]

        month = profile.months[0]
        assert [(p.project, p.wage, p.contribution, p.hours) for p in month.projects] == [
            ("Project X", Decimal("250.00"), Decimal("50.00"), Decimal("20.00")),
            ("Project Y", Decimal("150.00"), Decimal("30.00"), Decimal("12.00")),
        ]
        assert month.projects[0].contract_status == ContractStatus.LEGACY
        assert month.projects[0].company == "Acme"
        assert month.total_wage == Decimal("400.00")
        assert month.unassigned_wage == Decimal("600.00")
        assert month.unassigned_hours == Decimal("48.00")

        assert profile.total_wage + profile.unassigned_wage == Decimal("1000")
        assert profile.total_hours + profile.unassigned_hours == Decimal("80")
        assert profile.total_contribution + profile.unassigned_contribution == Decimal("200")

    def test_global_total_is_sum_of_profiles(self, engine, split_scenario):
        s = split_scenario
        other = make_profile("Luis Gómez")
        other_record = make_record(other, date(2025, 1, 1), date(2025, 1, 31), wage="310", hours="31")

        result = engine.calculate(
            [s.profile, other], [*s.records, other_record], s.allocations, JANUARY, "blended"
        )

        assert [p.profile for p in result.profiles] == ["Ana Torres", "Luis Gómez"]
        assert result.total.wage == Decimal("400.00")
        assert result.total.unassigned_wage == Decimal("910.00")
        assert result.total.unassigned_hours == Decimal("79.00")
        assert result.total.hours == sum(p.total_hours for p in result.profiles)

    def test_idempotent(self, engine, split_scenario):
        s = split_scenario
        args = ([s.profile], s.records, s.allocations, JANUARY, DataMode.BLENDED)

        first = engine.calculate(*args)
        second = engine.calculate(*args)

        assert first == second
        assert repr(asdict(first)) == repr(asdict(second))

    def test_profile_without_data(self, engine):
        profile = make_profile()
        result = engine.calculate([profile], [], [], JANUARY, DataMode.BLENDED)

        assert result.profiles[0].months == []
        assert result.profiles[0].total_wage == Decimal("0")
        assert result.total.wage == Decimal("0")

    def test_record_outside_range(self, engine, split_scenario):
        s = split_scenario
        february = DateRange(date(2025, 2, 1), date(2025, 2, 28))

        result = engine.calculate([s.profile], s.records, s.allocations, february, "actual")

        assert result.profiles[0].months == []
        assert result.warnings == []

    def test_over_allocation_reported(self, engine):
        profile = make_profile()
        record = make_record(profile, date(2025, 1, 1), date(2025, 1, 10))
        allocations = [
            make_allocation(profile, make_project("A"), "70", date(2025, 1, 1), date(2025, 1, 10)),
            make_allocation(profile, make_project("B"), "40", date(2025, 1, 5), date(2025, 1, 10)),
        ]

        result = engine.calculate([profile], [record], allocations, JANUARY, "actual")

        assert result.has_warnings
        assert result.profiles[0].unassigned_wage == Decimal("120.00")
        assert result.profiles[0].total_wage == Decimal("940.00")

    def test_rounded_parts_add_up_to_record(self, engine):
        profile = make_profile()
        record = make_record(profile, date(2025, 1, 1), date(2025, 1, 3), wage="100", hours="80")
        allocations = [
            make_allocation(profile, make_project(name), "100", day, day)
            for name, day in [
                ("A", date(2025, 1, 1)),
                ("B", date(2025, 1, 2)),
                ("C", date(2025, 1, 3)),
            ]
        ]

        result = engine.calculate([profile], [record], allocations, JANUARY, "actual")

        month = result.profiles[0].months[0]
        assert [e.wage for e in month.projects] == [
            Decimal("33.34"), Decimal("33.33"), Decimal("33.33"),
        ]
        assert [e.hours for e in month.projects] == [
            Decimal("26.67"), Decimal("26.67"), Decimal("26.66"),
        ]
        assert month.unassigned_wage == Decimal("0.00")
        assert result.profiles[0].total_wage == Decimal("100.00")
        assert result.profiles[0].total_hours == Decimal("80.00")


class TestFilters:
    """Filters narrow displayed entries; unassigned keeps the full basis."""

    def test_project_filter(self, engine, split_scenario):
        s = split_scenario
        filters = CalculationFilters(project_ids=frozenset({s.project_x.project_id}))

        filtered = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, "actual", filters
        )
        unfiltered = engine.calculate([s.profile], s.records, s.allocations, JANUARY, "actual")

        assert [p.project for p in filtered.profiles[0].months[0].projects] == ["Project X"]
        assert filtered.profiles[0].total_wage == Decimal("250.00")
        assert unfiltered.profiles[0].total_wage == Decimal("400.00")
        assert filtered.profiles[0].unassigned_wage == Decimal("600.00")
        assert unfiltered.profiles[0].unassigned_wage == Decimal("600.00")

    def test_unknown_project_yields_no_entries(self, engine, split_scenario):
        s = split_scenario
        filters = CalculationFilters(project_ids=frozenset({uuid4()}))

        result = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, "actual", filters
        )

        assert result.profiles[0].months[0].projects == []
        assert result.total.wage == Decimal("0")
        assert result.total.unassigned_wage == Decimal("600.00")

    def test_company_filter(self, engine, split_scenario):
        s = split_scenario

        acme = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, "actual",
            CalculationFilters(companies=frozenset({"Acme"})),
        )
        other = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, "actual",
            CalculationFilters(companies=frozenset({"Other"})),
        )

        assert acme.total.wage == Decimal("400.00")
        assert other.total.wage == Decimal("0")
        assert other.total.unassigned_wage == Decimal("600.00")

    def test_contract_status_filter(self, engine, split_scenario):
        s = split_scenario
        filters = CalculationFilters(contract_statuses=frozenset({ContractStatus.NEW}))

        result = engine.calculate(
            [s.profile], s.records, s.allocations, JANUARY, "actual", filters
        )

        assert [p.project for p in result.profiles[0].months[0].projects] == ["Project Y"]

    def test_profile_filter(self, engine, split_scenario):
        s = split_scenario
        other = make_profile("Luis Gómez")
        filters = CalculationFilters(profile_ids=frozenset({other.profile_id}))

        result = engine.calculate(
            [s.profile, other], s.records, s.allocations, JANUARY, "actual", filters
        )

        assert [p.profile_id for p in result.profiles] == [other.profile_id]

    def test_only_with_free_capacity(self, engine, split_scenario):
        s = split_scenario
        busy = make_profile("Busy Person")
        busy_record = make_record(busy, date(2025, 1, 1), date(2025, 1, 31), wage="500")
        busy_allocation = make_allocation(
            busy, s.project_x, "100", date(2025, 1, 1), date(2025, 1, 31)
        )

        result = engine.calculate(
            [s.profile, busy],
            [*s.records, busy_record],
            [*s.allocations, busy_allocation],
            JANUARY,
            "actual",
            CalculationFilters(only_with_free_capacity=True),
        )

        assert [p.profile for p in result.profiles] == ["Ana Torres"]
        assert result.total.wage == Decimal("400.00")


class TestBlendedMode:
    """Per-day actual/estimate priority in full calculations."""

    def test_actual_does_not_suppress_rest_of_month(self, engine):
        profile = make_profile()
        project = make_project("Alpha")
        estimate = make_record(
            profile, date(2025, 1, 1), date(2025, 1, 31),
            wage="3100", hours="155", kind=RecordKind.ESTIMATED,
        )
        actual = make_record(profile, date(2025, 1, 1), date(2025, 1, 10), wage="2000", hours="60")
        allocation = make_allocation(profile, project, "100", date(2025, 1, 1), date(2025, 1, 31))

        result = engine.calculate(
            [profile], [estimate, actual], [allocation], JANUARY, DataMode.BLENDED
        )

        entry = result.profiles[0].months[0].projects[0]
        assert entry.wage == Decimal("4100.00")
        assert entry.hours == Decimal("165.00")
