from ingest.coerce import IngestWarnings, to_float, to_int, to_text


def test_blank_is_zero_without_warning():
    w = IngestWarnings()
    assert to_float(None, w, "row 2") == 0
    assert to_float("  ", w, "row 2") == 0
    assert w.count == 0


def test_numeric_prefix_is_parsed():
    assert to_float("12.5 mL") == 12.5
    assert to_int("7.9") == 7
    assert to_int(3.0) == 3


def test_garbage_is_zero_and_warned():
    w = IngestWarnings()
    assert to_int("n/a", w, "row 4 column 8:00") == 0
    assert w.count == 1
    assert "row 4 column 8:00" in w.messages[0]
    assert w.as_dict()["warning_count"] == 1


def test_warning_list_is_capped_but_counted():
    w = IngestWarnings(limit=2)
    for _ in range(5):
        to_float("x", w)
    assert len(w.messages) == 2
    assert w.count == 5


def test_to_text_drops_integral_float_suffix():
    assert to_text(12345.0) == "12345"
    assert to_text(None, "Unknown") == "Unknown"
    assert to_text("  4W ") == "4W"


def test_overflowing_cells_are_zero_and_warned():
    w = IngestWarnings()
    assert to_int("1e400", w, "row 2") == 0
    assert to_float("-1e400 mL", w, "row 3") == 0
    assert to_int(10 ** 400, w, "row 4") == 0
    assert to_float(float("inf"), w, "row 5") == 0
    assert w.count == 4
