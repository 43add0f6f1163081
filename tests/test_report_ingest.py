import pytest

from ingest.errors import ReportSchemaError
from ingest.merge import ShallowFieldMerge
from ingest.report_ingest import ReportIngestService, UnknownReportKind
from repos.production_repo import ProductionRepository
from repos.snapshot_repo import ProductUsageRepository
from repos.turnaround_repo import TurnaroundRepository
from repos.usage_repo import UsageRepository

PRODUCTION_ROWS = [["EntryDate", "8:00", "9:00"], [45000, 5, 7], [45001, 1, 0]]


def test_production_reingest_is_idempotent(store, xlsx):
    svc = ReportIngestService(store=store)
    path = xlsx(PRODUCTION_ROWS)

    first = svc.ingest("production", path)
    assert (first["added"], first["updated"]) == (2, 0)
    before = ProductionRepository(store).list_all()

    second = svc.ingest("production", path)
    assert (second["added"], second["updated"]) == (0, 2)
    after = ProductionRepository(store).list_all()

    strip = lambda recs: [{k: v for k, v in r.items() if k != "uploaded_at"} for r in recs]
    assert strip(after) == strip(before)
    assert [r["date"] for r in after] == ["2023-03-16", "2023-03-15"]
    assert after[1]["hourly"] == {"8": 5, "9": 7}


def test_schema_error_leaves_collection_untouched(store, xlsx):
    svc = ReportIngestService(store=store)
    svc.ingest("production", xlsx(PRODUCTION_ROWS, "good.xlsx"))
    before = ProductionRepository(store).list_all()

    with pytest.raises(ReportSchemaError):
        svc.ingest("production", xlsx([["Date", "8:00"], [45002, 9]], "bad.xlsx"))
    assert ProductionRepository(store).list_all() == before


def test_turnaround_report_date(store, xlsx):
    rows = [
        ["DoseID", "Priority", "DoseDescription", "DoseStatus", "WorkStation", "Total Dose Timeline - Start to Sort (m)"],
        [1, 10, "Heparin 5000", "Sorted", "WS1", 12],
    ]
    results = ReportIngestService(store=store).ingest("turnaround", xlsx(rows), report_date="2024-05-01")
    assert results["report_date"] == "2024-05-01"
    assert TurnaroundRepository(store).get("2024-05-01")["total_doses"] == 1

    with pytest.raises(ReportSchemaError):
        ReportIngestService(store=store).ingest("turnaround", xlsx(rows, "again.xlsx"), report_date="05/01/2024")


def test_usage_reingest_policy(store, xlsx):
    header = ["Patient Location", "Dose Preparation Time", "Product Name", "Product NDC",
              "Product Total Volume", "Product Unused Volume"]
    svc = ReportIngestService(store=store)
    svc.ingest("usage", xlsx([header, ["4W", 45000, "Heparin", "1", 10, 3]], "a.xlsx"))
    svc.ingest("usage", xlsx([header, ["ED", 45000, "Saline", "2", 5, 0]], "b.xlsx"))
    rec = UsageRepository(store).get("2023-03-15")
    assert list(rec["by_product"]) == ["Saline"]

    ReportIngestService(store=store, policy=ShallowFieldMerge()).ingest(
        "usage", xlsx([header, ["ED", 45000, "Saline", "2", 5, 0]], "c.xlsx")
    )
    assert UsageRepository(store).get("2023-03-15")["id"] == rec["id"]


def test_snapshot_upload_replaces_document(store, xlsx):
    svc = ReportIngestService(store=store)
    header = ["Name", "NDCcode", "Location Name", "ProductCount", "DoseCount"]
    svc.ingest("product-usage", xlsx([header, ["Heparin", "1", "4W", 3, 2]], "a.xlsx"))
    svc.ingest("product-usage", xlsx([header, ["Saline", "2", "ED", 1, 1]], "b.xlsx"))
    doc = ProductUsageRepository(store).get()
    assert list(doc["by_product"]) == ["Saline"]
    assert doc["summary"]["total_product_uses"] == 1


def test_clear_history_keeps_snapshots(store, xlsx):
    svc = ReportIngestService(store=store)
    svc.ingest("production", xlsx(PRODUCTION_ROWS, "p.xlsx"))
    svc.ingest("product-usage", xlsx([["Name", "ProductCount"], ["Heparin", 3]], "u.xlsx"))
    svc.clear_history()
    assert ProductionRepository(store).list_all() == []
    assert ProductUsageRepository(store).get()["summary"]["total_product_uses"] == 3


def test_unknown_kind(store, xlsx):
    with pytest.raises(UnknownReportKind):
        ReportIngestService(store=store).ingest("inventory", xlsx(PRODUCTION_ROWS))


def test_usage_overflowing_volume_stores_finite_values(store, xlsx):
    header = ["Patient Location", "Dose Preparation Time", "Product Name", "Product NDC",
              "Product Total Volume", "Product Unused Volume"]
    results = ReportIngestService(store=store).ingest(
        "usage", xlsx([header, ["4W", 45000, "Heparin", "1", 10, "1e400"]])
    )
    assert results["warning_count"] == 1

    rec = UsageRepository(store).get("2023-03-15")
    assert (rec["used_volume"], rec["waste_volume"], rec["waste_percent"]) == (10, 0, 0)
    raw = store.path_for("usage_data").read_text()
    assert "Infinity" not in raw and "NaN" not in raw
