from datetime import date, datetime, timezone

from ingest.dates import excel_serial_to_iso


def test_serial_date_conversion():
    assert excel_serial_to_iso(45000) == "2023-03-15"
    assert excel_serial_to_iso(25569) == "1970-01-01"


def test_serial_fraction_is_floored():
    assert excel_serial_to_iso(45000.99) == "2023-03-15"
    assert excel_serial_to_iso("45000.5") == "2023-03-15"


def test_decoded_date_cells_pass_through():
    assert excel_serial_to_iso(datetime(2024, 2, 29, 23, 10)) == "2024-02-29"
    assert excel_serial_to_iso(date(2024, 1, 2)) == "2024-01-02"
    assert excel_serial_to_iso(datetime(2024, 1, 2, 1, 0, tzinfo=timezone.utc)) == "2024-01-02"


def test_unusable_values_return_none():
    assert excel_serial_to_iso(None) is None
    assert excel_serial_to_iso("") is None
    assert excel_serial_to_iso("TOTAL") is None
    assert excel_serial_to_iso(True) is None
