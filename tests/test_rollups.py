from datetime import date, timedelta

from rollups import bypass, production, snapshots, turnaround, usage
from rollups.labels import format_hour, priority_label
from rollups.summary import dashboard_summary
from rollups.window import within_window

TODAY = date(2024, 3, 31)


def _day(offset):
    return (TODAY - timedelta(days=offset)).isoformat()


def test_window_boundary_is_inclusive():
    records = [{"date": _day(30)}, {"date": _day(31)}, {"date": _day(0)}, {"date": None}]
    kept = within_window(records, 30, today=TODAY)
    assert [r["date"] for r in kept] == [_day(30), _day(0)]


def test_labels():
    assert [format_hour(h) for h in (0, 1, 12, 13, 23)] == ["12 AM", "1 AM", "12 PM", "1 PM", "11 PM"]
    assert priority_label(10) == "STAT"
    assert priority_label(99) == "Priority 99"


def test_production_daily_ascending():
    records = [{"date": _day(1), "total_doses": 2}, {"date": _day(2), "total_doses": 1}]
    out = production.daily(records, days=30, today=TODAY)
    assert [r["date"] for r in out] == [_day(2), _day(1)]


def test_production_weekly_groups_on_monday():
    records = [
        {"date": "2023-03-13", "total_doses": 2, "hourly": {"8": 2}},
        {"date": "2023-03-15", "total_doses": 12, "hourly": {"8": 5, "9": 7}},
        {"date": "2023-03-20", "total_doses": 1, "hourly": {"9": 1}},
    ]
    out = production.group_weekly(records)
    assert [w["date"] for w in out] == ["Week of Mar 13", "Week of Mar 20"]
    assert out[0]["total_doses"] == 14
    assert out[0]["hourly"] == {"8": 7, "9": 7}
    assert out[0]["sort_key"] == "2023-03-13"


def test_production_hourly_has_24_rows():
    records = [
        {"date": _day(1), "hourly": {"8": 5, "9": 7}},
        {"date": _day(2), "hourly": {"8": 2}},
    ]
    out = production.hourly(records, days=30, today=TODAY)
    assert len(out) == 24
    assert out[8] == {"hour": 8, "hour_label": "8 AM", "total_doses": 7, "avg_doses": 4}
    assert out[9]["avg_doses"] == 7
    assert out[0]["total_doses"] == 0


def _turnaround_records():
    return [
        {
            "date": _day(1),
            "total_doses": 3,
            "avg_turnaround": 20.0,
            "by_priority": {"40": {"count": 2, "total_time": 40}, "10": {"count": 1, "total_time": 20}},
            "by_workstation": {"WS1": {"count": 3, "total_time": 60}},
            "by_drug": {"Heparin": {"count": 2, "total_time": 30}, "Saline": {"count": 1, "total_time": 30}},
        },
        {
            "date": _day(2),
            "total_doses": 1,
            "avg_turnaround": 10.0,
            "by_priority": {"10": {"count": 1, "total_time": 10}},
            "by_workstation": {"WS2": {"count": 1, "total_time": 10}},
            "by_drug": {"Saline": {"count": 1, "total_time": 10}},
        },
    ]


def test_priority_rollup_conserves_counts():
    records = _turnaround_records()
    out = turnaround.by_priority(records, days=30, today=TODAY)
    assert [r["priority"] for r in out] == [10, 40]
    assert out[0] == {"priority": 10, "priority_label": "STAT", "count": 2, "avg_turnaround": 15.0}
    assert sum(r["count"] for r in out) == sum(r["total_doses"] for r in records)


def test_top_drugs_and_workstations_by_count():
    records = _turnaround_records()
    drugs = turnaround.top_drugs(records, days=30, limit=1, today=TODAY)
    assert len(drugs) == 1
    assert drugs[0]["count"] == 2
    stations = turnaround.by_workstation(records, days=30, today=TODAY)
    assert stations[0] == {"workstation": "WS1", "count": 3, "avg_turnaround": 20.0}


def test_bypass_views():
    records = [
        {"location": "ED", "total_bypasses": 2, "hourly": {"7": 2}},
        {"location": "4W", "total_bypasses": 5, "hourly": {"7": 1, "8": 4}},
    ]
    assert [r["location"] for r in bypass.summary(records)] == ["4W", "ED"]
    hours = bypass.hourly(records)
    assert hours[7] == {"hour": 7, "hour_label": "7 AM", "bypasses": 3}
    assert sum(h["bypasses"] for h in hours) == 7


def test_usage_rollups():
    records = [
        {
            "date": _day(1), "total_volume": 10, "used_volume": 7, "waste_volume": 3, "product_count": 1,
            "by_product": {"Heparin": {"used": 7, "waste": 3, "count": 1, "ndc": "1"}},
            "by_location": {"4W": {"used": 7, "waste": 3, "count": 1}},
        },
        {
            "date": _day(3), "total_volume": 10, "used_volume": 10, "waste_volume": 0, "product_count": 1,
            "by_product": {"Saline": {"used": 10, "waste": 0, "count": 1, "ndc": "2"}},
            "by_location": {"ED": {"used": 10, "waste": 0, "count": 1}},
        },
    ]
    top = usage.top_waste(records, days=30, today=TODAY)
    assert top[0] == {"product": "Heparin", "ndc": "1", "used_ml": 7, "waste_ml": 3, "total_ml": 10,
                      "waste_percent": 30.0, "count": 1}
    assert [r["location"] for r in usage.by_location(records, days=30, today=TODAY)] == ["4W", "ED"]
    summary = usage.summary(records, days=30, today=TODAY)
    assert summary["waste_percent"] == 15.0
    assert summary["days_tracked"] == 2


def test_dashboard_summary():
    production_records = [{"date": _day(1), "total_doses": 100}, {"date": _day(60), "total_doses": 50}]
    turnaround_records = [{"date": _day(1), "avg_turnaround": 20}, {"date": _day(2), "avg_turnaround": 25}]
    bypass_records = [{"location": "4W", "total_bypasses": 3}]
    out = dashboard_summary(production_records, turnaround_records, bypass_records, days=30, today=TODAY)
    assert out["total_doses"] == 100
    assert out["days_tracked"] == 1
    assert out["avg_turnaround_minutes"] == 22.5
    assert out["bypass_rate"] == 3.0
    assert out["data_range"]["production"] == {"start": _day(60), "end": _day(1)}


def test_dashboard_summary_without_data():
    out = dashboard_summary([], [], [])
    assert out["total_doses"] == 0
    assert out["bypass_rate"] == 0
    assert out["data_range"]["production"] is None


def test_snapshot_views_default_when_empty():
    assert snapshots.product_usage_summary({})["total_products"] == 0
    assert snapshots.detailed_wastage_summary({}) == {"total_records": 0, "total_dates": 0, "total_waste_ml": 0}
    assert snapshots.stock_doses_all({}) == []
    assert snapshots.product_wastage_by_type({}) == []


def test_snapshot_views():
    doc = {
        "products": [
            {"name": "A", "waste_ml": 5, "waste_dollars": 9, "waste_percent": 1},
            {"name": "B", "waste_ml": 8, "waste_dollars": 1, "waste_percent": 2},
        ]
    }
    assert [p["name"] for p in snapshots.product_wastage_top(doc, sort_by="waste_dollars")] == ["A", "B"]
    assert [p["name"] for p in snapshots.product_wastage_top(doc, limit=1)] == ["B"]

    usage_doc = {"by_location": {"4W": {"product_count": 2, "dose_count": 1, "products": {"A": 2}},
                                 "undefined": {"product_count": 9, "dose_count": 9, "products": {}}}}
    assert snapshots.product_usage_by_location(usage_doc) == [
        {"location": "4W", "product_count": 2, "dose_count": 1, "unique_products": 1}
    ]

    stock_doc = {"stocks": [{"total": 3}], "dilutions": [{"total": 9}], "all": [{"total": 9}, {"total": 3}]}
    assert snapshots.stock_doses_all(stock_doc, dose_type="dilution") == [{"total": 9}]
    assert snapshots.stock_doses_top(stock_doc, limit=1) == [{"total": 9}]


def test_detailed_wastage_daily_window():
    doc = {"by_date": {
        _day(1): {"total_volume": 10, "used_volume": 6, "waste_volume": 4, "product_count": 1},
        _day(40): {"total_volume": 10, "used_volume": 10, "waste_volume": 0, "product_count": 1},
    }}
    out = snapshots.detailed_wastage_daily(doc, days=30, today=TODAY)
    assert len(out) == 1
    assert out[0]["waste_percent"] == 40.0
    assert out[0]["multi_dose_count"] == 0
