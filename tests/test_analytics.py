"""Tests for the analytics module."""

from datetime import date

import pytest

from marketing_insights.analytics import (
    DashboardEngine,
    DemographicAggregator,
    GeoLookup,
    RegionView,
    WeeklyView,
    round_money,
    safe_ratio,
)
from marketing_insights.analytics.encoding import bubble_radius, spend_color
from marketing_insights.analytics.regions import build_region_view, merge_regions
from marketing_insights.analytics.stats import locale_sort_key, percentage
from marketing_insights.analytics.weekly import build_weekly_view
from marketing_insights.analytics.devices import build_device_view
from marketing_insights.config import Coordinates
from marketing_insights.models import DashboardPack, MarketingDataset


# =============================================================================
# FIXTURES
# =============================================================================


COORDS = {
    "Dubai": Coordinates(lat=25.276987, lng=55.296249),
    "Sharjah": Coordinates(lat=25.346255, lng=55.420932),
    "Riyadh": Coordinates(lat=24.7136, lng=46.6753),
    "NewYork": Coordinates(lat=40.7128, lng=-74.006),
    "Kuwait": Coordinates(lat=29.3759, lng=47.9774),
}


def region(name: str, country: str, revenue: float, spend: float, **kwargs) -> dict:
    return {
        "region": name,
        "country": country,
        "impressions": kwargs.get("impressions", 1000),
        "clicks": kwargs.get("clicks", 100),
        "conversions": kwargs.get("conversions", 10),
        "spend": spend,
        "revenue": revenue,
    }


def cell(gender: str, age_group: str, pct: float, impressions: int, clicks: int = 0, conversions: int = 0) -> dict:
    return {
        "gender": gender,
        "age_group": age_group,
        "percentage_of_audience": pct,
        "performance": {
            "impressions": impressions,
            "clicks": clicks,
            "conversions": conversions,
        },
    }


def week(start: str, end: str, revenue: float, spend: float) -> dict:
    return {
        "week_start": start,
        "week_end": end,
        "impressions": 1000,
        "clicks": 50,
        "conversions": 5,
        "spend": spend,
        "revenue": revenue,
    }


def campaign(campaign_id: int, **kwargs) -> dict:
    return {
        "id": campaign_id,
        "name": f"Campaign {campaign_id}",
        "spend": kwargs.pop("spend", 0),
        "revenue": kwargs.pop("revenue", 0),
        "impressions": kwargs.pop("impressions", 0),
        "clicks": kwargs.pop("clicks", 0),
        "conversions": kwargs.pop("conversions", 0),
        **kwargs,
    }


def make_dataset(*campaigns: dict, **extra) -> MarketingDataset:
    return MarketingDataset.model_validate({"campaigns": list(campaigns), **extra})


@pytest.fixture
def geo() -> GeoLookup:
    return GeoLookup(COORDS)


@pytest.fixture
def dataset() -> MarketingDataset:
    """Two campaigns covering every child collection."""
    return make_dataset(
        campaign(
            1,
            spend=2500,
            revenue=240000,
            impressions=300000,
            clicks=9000,
            conversions=600,
            weekly_performance=[
                week("2024-10-15", "2024-10-21", 24000, 270),
                week("2024-10-01", "2024-10-07", 22000, 250),
            ],
            regional_performance=[
                region("Dubai", "UAE", 90000, 900),
                region("Sharjah", "UAE", 20000, 300),
            ],
            demographic_breakdown=[
                cell("Male", "25-34", 30, 100000, clicks=3000, conversions=200),
                cell("Female", "18-24", 20, 50000, clicks=1500, conversions=100),
            ],
            device_performance=[
                {"device": "Mobile", "impressions": 225000, "clicks": 7000, "conversions": 500, "spend": 1900, "revenue": 180000},
                {"device": "Desktop", "impressions": 75000, "clicks": 2000, "conversions": 100, "spend": 600, "revenue": 60000},
            ],
        ),
        campaign(
            2,
            spend=1000,
            revenue=80000,
            impressions=200000,
            clicks=6000,
            conversions=200,
            weekly_performance=[
                week("2024-10-01", "2024-10-07", 8000, 120),
                week("2024-10-08", "2024-10-14", 9000, 130),
            ],
            regional_performance=[
                region("Riyadh", "KSA", 25000, 300),
                region("Sharjah", "UAE", 5000, 100),
                region("Atlantis", "Nowhere", 1000, 10),
            ],
            demographic_breakdown=[
                cell("Male", "18-24", 50, 50000, clicks=1000, conversions=0),
                cell("Non-binary", "18-24", 5, 10000, clicks=200, conversions=10),
            ],
            device_performance=[
                {"device": "Mobile", "impressions": 150000, "clicks": 4500, "conversions": 150, "spend": 700, "revenue": 56000},
                {"device": "Tablet", "impressions": 50000, "clicks": 1500, "conversions": 50, "spend": 300, "revenue": 24000},
            ],
        ),
    )


@pytest.fixture
def engine(dataset: MarketingDataset) -> DashboardEngine:
    return DashboardEngine(dataset=dataset, coordinates=COORDS)


# =============================================================================
# HELPERS
# =============================================================================


class TestSafeRatio:
    """Tests for the shared derived-metric helpers."""

    @pytest.mark.parametrize("numerator", [0, 1, 250.5, -3])
    def test_zero_denominator_is_zero(self, numerator: float) -> None:
        assert safe_ratio(numerator, 0) == 0

    @pytest.mark.parametrize("denominator", [1, 7, 0.5])
    def test_zero_numerator_is_zero(self, denominator: float) -> None:
        assert safe_ratio(0, denominator) == 0

    def test_negative_denominator_is_zero(self) -> None:
        assert safe_ratio(10, -5) == 0

    def test_regular_division(self) -> None:
        assert safe_ratio(50, 1000) == pytest.approx(0.05)

    def test_percentage(self) -> None:
        assert percentage(50, 1000) == pytest.approx(5.0)
        assert percentage(5, 0) == 0


class TestRoundMoney:
    """Money rounds half up to whole units."""

    def test_half_rounds_up(self) -> None:
        assert round_money(2.5) == 3
        assert round_money(3.5) == 4

    def test_negative_half_rounds_towards_positive(self) -> None:
        assert round_money(-2.5) == -2

    def test_regular_rounding(self) -> None:
        assert round_money(33.33) == 33
        assert round_money(66.67) == 67


class TestLocaleSortKey:
    def test_age_labels(self) -> None:
        labels = ["65+", "18-24", "35-44", "25-34"]
        assert sorted(labels, key=locale_sort_key) == ["18-24", "25-34", "35-44", "65+"]

    def test_case_insensitive_letters(self) -> None:
        assert sorted(["Unknown", "under 18"], key=locale_sort_key) == ["under 18", "Unknown"]

    def test_lowercase_breaks_ties(self) -> None:
        assert sorted(["Adults", "adults"], key=locale_sort_key) == ["adults", "Adults"]


class TestEncoding:
    """Tests for bubble radius and spend colour."""

    def test_radius_bounds(self) -> None:
        assert bubble_radius(0, 1000) == 4
        assert bubble_radius(1000, 1000) == pytest.approx(20)

    def test_radius_is_sub_linear(self) -> None:
        # sqrt(0.25) = 0.5 of the radius range
        assert bubble_radius(250, 1000) == pytest.approx(12)

    def test_negative_revenue_maps_to_min(self) -> None:
        assert bubble_radius(-500, 1000) == 4

    def test_zero_max_revenue_maps_to_min(self) -> None:
        assert bubble_radius(0, 0) == 4
        assert bubble_radius(100, 0) == 4

    def test_color_anchors(self) -> None:
        assert spend_color(0, 100) == "rgb(59,130,246)"
        assert spend_color(100, 100) == "rgb(239,68,68)"

    def test_color_midpoint(self) -> None:
        assert spend_color(50, 100) == "rgb(149,99,157)"

    def test_color_clamped_above_max(self) -> None:
        assert spend_color(500, 100) == "rgb(239,68,68)"

    def test_zero_max_spend_uses_neutral_color(self) -> None:
        assert spend_color(0, 0) == "#60A5FA"


class TestGeoLookup:
    """Tests for the static geocoding lookup."""

    def test_exact_name(self, geo: GeoLookup) -> None:
        assert geo.resolve("Dubai", "UAE") == COORDS["Dubai"]

    def test_whitespace_removed(self, geo: GeoLookup) -> None:
        assert geo.resolve("New  York", "USA") == COORDS["NewYork"]

    def test_country_fallback(self, geo: GeoLookup) -> None:
        assert geo.resolve("Kuwait City", "Kuwait") == COORDS["Kuwait"]

    def test_unknown_location(self, geo: GeoLookup) -> None:
        assert geo.resolve("Atlantis", "Nowhere") is None


# =============================================================================
# REGION VIEW
# =============================================================================


class TestRegionView:
    """Tests for region merge and geocoding."""

    def test_returns_region_view(self, engine: DashboardEngine) -> None:
        assert isinstance(engine.get_region_view(), RegionView)

    def test_single_campaign_region_kept(self, geo: GeoLookup) -> None:
        data = make_dataset(
            campaign(1, regional_performance=[region("Dubai", "UAE", 90000, 900)]),
            campaign(2, regional_performance=[region("Riyadh", "KSA", 25000, 300)]),
        )
        view = build_region_view(data, geo)
        dubai = [p for p in view.points if p.region == "Dubai"]
        assert len(dubai) == 1
        assert dubai[0].revenue == 90000
        assert dubai[0].spend == 900

    def test_same_location_merged(self, engine: DashboardEngine) -> None:
        view = engine.get_region_view()
        sharjah = [p for p in view.points if p.region == "Sharjah"]
        assert len(sharjah) == 1
        assert sharjah[0].revenue == 25000
        assert sharjah[0].spend == 400
        assert sharjah[0].impressions == 2000

    def test_revenue_conserved_by_merge(self, dataset: MarketingDataset) -> None:
        merged = merge_regions(dataset)
        source_total = sum(
            r.revenue for c in dataset.campaigns for r in c.regional_performance
        )
        assert merged["revenue"].sum() == pytest.approx(source_total)

    def test_first_appearance_order(self, engine: DashboardEngine) -> None:
        view = engine.get_region_view()
        assert [p.region for p in view.points] == ["Dubai", "Sharjah", "Riyadh"]

    def test_unmapped_locations_dropped(self, engine: DashboardEngine) -> None:
        view = engine.get_region_view()
        assert view.unmapped == [("Atlantis", "Nowhere")]
        assert view.dropped_count == 1
        assert all(p.region != "Atlantis" for p in view.points)

    def test_ratios_recomputed_from_sums(self, engine: DashboardEngine) -> None:
        dubai = engine.get_region_view().points[0]
        assert dubai.ctr == pytest.approx(10.0)
        assert dubai.conversion_rate == pytest.approx(10.0)

    def test_encoding_uses_mapped_maxima(self, engine: DashboardEngine) -> None:
        points = {p.region: p for p in engine.get_region_view().points}
        assert points["Dubai"].radius == pytest.approx(20)
        assert points["Dubai"].color == "rgb(239,68,68)"
        assert points["Riyadh"].radius < points["Dubai"].radius

    def test_all_zero_revenue_maps_to_min_radius(self, geo: GeoLookup) -> None:
        data = make_dataset(
            campaign(1, regional_performance=[
                region("Dubai", "UAE", 0, 0),
                region("Riyadh", "KSA", 0, 0),
            ])
        )
        view = build_region_view(data, geo)
        assert [p.radius for p in view.points] == [4, 4]

    def test_top_level_region_performance_used_when_present(self, geo: GeoLookup) -> None:
        data = make_dataset(
            campaign(1, regional_performance=[region("Dubai", "UAE", 90000, 900)]),
            region_performance=[region("Riyadh", "KSA", 5000, 50)],
        )
        view = build_region_view(data, geo)
        assert [p.region for p in view.points] == ["Riyadh"]


# =============================================================================
# DEMOGRAPHIC VIEW
# =============================================================================


class TestGenderTotals:
    """Tests for gender totals and audience-share allocation."""

    def test_audience_share_allocation(self) -> None:
        data = make_dataset(
            campaign(
                1,
                spend=1000,
                revenue=5000,
                impressions=1500,
                demographic_breakdown=[
                    cell("Male", "18-24", 40, 1000),
                    cell("Female", "18-24", 60, 500),
                ],
            )
        )
        totals = DemographicAggregator(data).gender_totals()
        assert totals["Male"].avg_audience_pct == pytest.approx(40)
        assert totals["Female"].avg_audience_pct == pytest.approx(60)
        assert totals["Male"].spend == pytest.approx(400)
        assert totals["Female"].spend == pytest.approx(600)
        assert totals["Male"].revenue == pytest.approx(2000)

    def test_average_is_unweighted(self, dataset: MarketingDataset) -> None:
        totals = DemographicAggregator(dataset).gender_totals()
        # Male cells: 30 (100k impressions) and 50 (50k impressions)
        assert totals["Male"].avg_audience_pct == pytest.approx(40)
        assert totals["Male"].cell_count == 2

    def test_spend_split_sums_to_total(self, dataset: MarketingDataset) -> None:
        totals = DemographicAggregator(dataset).gender_totals()
        assert totals["Male"].spend + totals["Female"].spend == pytest.approx(3500)
        assert totals["Male"].share + totals["Female"].share == pytest.approx(1)

    def test_other_genders_excluded(self, dataset: MarketingDataset) -> None:
        totals = DemographicAggregator(dataset).gender_totals()
        assert set(totals) == {"Male", "Female"}
        assert totals["Male"].impressions == 150000
        assert totals["Female"].impressions == 50000

    def test_zero_percentages_allocate_nothing(self) -> None:
        data = make_dataset(
            campaign(
                1,
                spend=1000,
                demographic_breakdown=[
                    cell("Male", "18-24", 0, 100),
                    cell("Female", "18-24", 0, 100),
                ],
            )
        )
        totals = DemographicAggregator(data).gender_totals()
        for gender in ("Male", "Female"):
            assert totals[gender].share == 0
            assert totals[gender].spend == 0
            assert totals[gender].revenue == 0


class TestAgeGroups:
    """Tests for per-gender age tables and the age chart."""

    def test_age_rows_sorted_with_rates(self, dataset: MarketingDataset) -> None:
        rows = DemographicAggregator(dataset).age_group_rows("Male")
        assert [r.age_group for r in rows] == ["18-24", "25-34"]
        young, older = rows
        assert young.ctr == pytest.approx(2.0)
        assert young.conversion_rate == 0
        assert older.ctr == pytest.approx(3.0)
        assert older.conversion_rate == pytest.approx(200 / 3000 * 100)

    def test_zero_impressions_row(self) -> None:
        data = make_dataset(
            campaign(1, demographic_breakdown=[cell("Female", "65+", 10, 0)])
        )
        rows = DemographicAggregator(data).age_group_rows("Female")
        assert rows[0].ctr == 0
        assert rows[0].conversion_rate == 0

    def test_age_chart_ignores_gender(self, dataset: MarketingDataset) -> None:
        chart = DemographicAggregator(dataset).age_group_spend()
        by_age = {a.age_group: a for a in chart}
        # Male 50k + Female 50k + Non-binary 10k
        assert by_age["18-24"].impressions == 110000

    def test_age_chart_uses_impression_share(self) -> None:
        data = make_dataset(
            campaign(
                1,
                spend=1000,
                revenue=3000,
                impressions=4000,
                demographic_breakdown=[
                    cell("Male", "25-34", 25, 1000),
                    cell("Female", "25-34", 25, 1000),
                    cell("Male", "18-24", 25, 1500),
                    cell("Female", "18-24", 25, 500),
                ],
            )
        )
        chart = DemographicAggregator(data).age_group_spend()
        assert [(a.age_group, a.spend, a.revenue) for a in chart] == [
            ("18-24", 500, 1500),
            ("25-34", 500, 1500),
        ]

    def test_age_chart_rounds_to_whole_units(self) -> None:
        data = make_dataset(
            campaign(
                1,
                spend=100,
                impressions=3000,
                demographic_breakdown=[
                    cell("Male", "18-24", 50, 1000),
                    cell("Male", "25-34", 50, 2000),
                ],
            )
        )
        chart = DemographicAggregator(data).age_group_spend()
        assert [a.spend for a in chart] == [33, 67]
        assert sum(a.spend for a in chart) == 100

    def test_build_view(self, engine: DashboardEngine) -> None:
        view = engine.get_demographic_view()
        assert view.male is not None and view.female is not None
        assert [r.age_group for r in view.female_age_groups] == ["18-24"]
        assert len(view.age_group_spend) == 2


# =============================================================================
# WEEKLY VIEW
# =============================================================================


class TestWeeklyView:
    """Tests for the weekly time series."""

    def test_returns_weekly_view(self, engine: DashboardEngine) -> None:
        assert isinstance(engine.get_weekly_view(), WeeklyView)

    def test_chronological_order(self, engine: DashboardEngine) -> None:
        starts = [w.week_start for w in engine.get_weekly_view()]
        assert starts == [date(2024, 10, 1), date(2024, 10, 8), date(2024, 10, 15)]
        assert starts == sorted(starts)

    def test_sums_across_campaigns(self, engine: DashboardEngine) -> None:
        first = next(iter(engine.get_weekly_view()))
        assert first.revenue == 30000
        assert first.spend == 370
        assert first.impressions == 2000

    def test_iteration_is_restartable(self, engine: DashboardEngine) -> None:
        view = engine.get_weekly_view()
        assert list(view) == list(view)
        assert len(view) == 3

    def test_chronological_not_lexical(self) -> None:
        data = make_dataset(
            campaign(1, weekly_performance=[
                week("2025-01-06", "2025-01-12", 2, 2),
                week("2024-12-30", "2025-01-05", 1, 1),
            ])
        )
        view = build_weekly_view(data)
        assert [w.revenue for w in view] == [1, 2]


# =============================================================================
# DEVICE VIEW
# =============================================================================


class TestDeviceView:
    """Tests for device comparison."""

    @pytest.fixture
    def devices(self, dataset: MarketingDataset) -> dict:
        return {d.device: d for d in build_device_view(dataset).devices}

    def test_devices_merged(self, dataset: MarketingDataset, devices: dict) -> None:
        view = build_device_view(dataset)
        assert [d.device for d in view.devices] == ["Mobile", "Desktop", "Tablet"]
        assert devices["Mobile"].impressions == 375000
        assert devices["Mobile"].spend == pytest.approx(2600)
        assert devices["Mobile"].revenue == pytest.approx(236000)

    def test_traffic_share(self, devices: dict) -> None:
        assert sum(d.percentage_of_traffic for d in devices.values()) == pytest.approx(100)
        assert devices["Desktop"].percentage_of_traffic == pytest.approx(15)

    def test_rates_recomputed(self, devices: dict) -> None:
        desktop = devices["Desktop"]
        assert desktop.ctr == pytest.approx(2000 / 75000 * 100)
        assert desktop.conversion_rate == pytest.approx(5.0)

    def test_pack_device_rows(self, engine: DashboardEngine) -> None:
        rows = engine.get_dashboard_pack().device_comparison
        assert rows[0]["device"] == "Mobile"
        assert rows[0]["revenue"] == 236000
        assert rows[0]["spend"] == 2600


# =============================================================================
# ENGINE
# =============================================================================


class TestEmptyDataset:
    """Every view is empty or zeroed for a dataset without campaigns."""

    @pytest.fixture
    def empty_engine(self) -> DashboardEngine:
        return DashboardEngine(dataset=MarketingDataset(), coordinates=COORDS)

    def test_region_view_empty(self, empty_engine: DashboardEngine) -> None:
        view = empty_engine.get_region_view()
        assert view.points == []
        assert view.dropped_count == 0

    def test_demographic_view_zeroed(self, empty_engine: DashboardEngine) -> None:
        view = empty_engine.get_demographic_view()
        assert view.male.spend == 0
        assert view.female.impressions == 0
        assert view.male_age_groups == []
        assert view.age_group_spend == []

    def test_weekly_and_device_empty(self, empty_engine: DashboardEngine) -> None:
        assert list(empty_engine.get_weekly_view()) == []
        assert empty_engine.get_device_view().devices == []

    def test_totals_zeroed(self, empty_engine: DashboardEngine) -> None:
        totals = empty_engine.get_campaign_totals()
        assert totals.campaign_count == 0
        assert totals.ctr == 0
        assert totals.roas == 0

    def test_campaign_without_children(self) -> None:
        engine = DashboardEngine(
            dataset=make_dataset(campaign(1, spend=100)), coordinates=COORDS
        )
        pack = engine.get_dashboard_pack()
        assert pack.region_points == []
        assert pack.weekly_series == []
        assert pack.gender_totals["male"]["spend"] == 0


class TestCampaignTotals:
    def test_totals(self, engine: DashboardEngine) -> None:
        totals = engine.get_campaign_totals()
        assert totals.campaign_count == 2
        assert totals.spend == 3500
        assert totals.revenue == 320000
        assert totals.ctr == pytest.approx(3.0)
        assert totals.roas == pytest.approx(320000 / 3500)


class TestDashboardPack:
    """Tests for get_dashboard_pack()."""

    def test_returns_pack(self, engine: DashboardEngine) -> None:
        assert isinstance(engine.get_dashboard_pack(), DashboardPack)

    def test_money_is_whole_units(self, engine: DashboardEngine) -> None:
        pack = engine.get_dashboard_pack()
        assert all(isinstance(w["spend"], int) for w in pack.weekly_series)
        assert isinstance(pack.gender_totals["male"]["spend"], int)

    def test_to_dict_sections(self, engine: DashboardEngine) -> None:
        result = engine.get_dashboard_pack().to_dict()
        assert set(result) == {"meta", "totals", "region", "demographic", "weekly", "device"}
        assert result["weekly"][0]["week_start"] == "2024-10-01"
        assert result["region"]["dropped_count"] == 1

    def test_to_json(self, engine: DashboardEngine) -> None:
        json_str = engine.get_dashboard_pack().to_json()
        assert isinstance(json_str, str)
        assert "Dubai" in json_str

    def test_executive_summary(self, engine: DashboardEngine) -> None:
        summary = engine.get_dashboard_pack().get_executive_summary()
        assert summary["top_region"] == "Dubai"
        assert summary["top_week"] == "2024-10-01"
        assert summary["total_spend"] == 3500
