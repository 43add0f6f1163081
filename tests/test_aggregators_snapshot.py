from ingest.aggregators import detailed_wastage, product_usage, product_wastage, stock_doses


def test_product_usage_document():
    records = [
        {"Name": "Heparin", "NDCcode": "1", "Location Name": "4W", "ProductCount": 3, "DoseCount": 2},
        {"name": "Heparin", "NDC": "1", "Location": "ED", "ProductCount": 1, "DoseCount": 1},
        {"Name": "Saline", "ProductCount": 5, "DoseCount": 5},
    ]
    doc = product_usage.aggregate(records).document
    assert doc["by_product"]["Heparin"]["product_count"] == 4
    assert doc["by_product"]["Heparin"]["locations"] == {"4W": 3, "ED": 1}
    assert doc["by_location"]["Unknown"]["products"] == {"Saline": 5}
    assert doc["summary"] == {"total_products": 2, "total_locations": 3, "total_product_uses": 9, "total_doses": 8}


def test_product_wastage_percent_and_sort():
    records = [
        {"Name": "A", "Type": "Vial", "Product Size(ml)": 10, "Partial Products Count": 2,
         "Total Wastage(mL)": 5, "Total Wastage(Dollar Amount)": 1.5},
        {"Name": "B", "Type": "Vial", "Product Size(ml)": 0, "Partial Products Count": 2,
         "Total Wastage(mL)": 8, "Total Wastage(Dollar Amount)": 0.25},
    ]
    doc = product_wastage.aggregate(records).document
    assert [p["name"] for p in doc["products"]] == ["B", "A"]
    assert doc["products"][1]["waste_percent"] == 25.0
    assert doc["products"][0]["waste_percent"] == 0
    assert doc["by_type"]["Vial"]["count"] == 2
    assert doc["summary"]["total_partial_products"] == 4


def test_detailed_wastage_flags_and_dates():
    records = [
        {"Dose Preparation Time": 45000, "Product Name": "KCl Stock", "Product Total Volume": 10,
         "Product Unused Volume": 4, "Multi-Dose Product": "Yes", "Patient Location": "ICU-1"},
        {"Dose Preparation Time": 45001, "Product Name": "KCl Stock", "Product Total Volume": 10,
         "Product Unused Volume": 0, "Multi-Dose Product": "No", "Patient Location": "ICU-2"},
        {"Product Name": "no date"},
    ]
    doc = detailed_wastage.aggregate(records).document
    assert doc["by_date"]["2023-03-15"]["multi_dose_count"] == 1
    assert doc["by_date"]["2023-03-15"]["stock_count"] == 1
    assert doc["by_product"]["KCl Stock"]["is_multi_dose"] is True
    assert doc["by_product"]["KCl Stock"]["count"] == 2
    assert doc["by_location"]["ICU"]["count"] == 2
    assert doc["summary"]["date_range"] == {"start": "2023-03-15", "end": "2023-03-16"}
    assert doc["summary"]["total_records"] == 2


def test_stock_dose_parsing():
    entry = stock_doses.parse_dose("DILUTION: BAXA - ASCORBIC ACID 100MG/ML DILUTION IN SW - 25ML", 4)
    assert entry["type"] == "Dilution"
    assert entry["name"] == "ASCORBIC ACID 100MG/ML DILUTION IN SW - 25ML"
    assert entry["size"] == "100MG"


def test_stock_doses_document():
    records = [
        {"Dose": "STOCK: KCL 2MEQ/ML", "Total": 3},
        {"Dose": "DILUTION: MORPHINE 1MG/ML", "Total": 9},
        {"dose": "Something else", "Total": 1},
    ]
    doc = stock_doses.aggregate(records).document
    assert len(doc["stocks"]) == 2
    assert [e["total"] for e in doc["all"]] == [9, 3, 1]
    assert doc["summary"] == {"total_stock_types": 2, "total_dilution_types": 1, "total_doses_made": 13}
