# Centralized collection names to prevent drift. Each collection is one JSON file under DATA_DIR.

SCHEMA_VERSION = 1

# History collections: ordered lists, one record per natural key.
COL_PRODUCTION = "production_data"
COL_TURNAROUND = "turnaround_data"
COL_BYPASS = "bypass_data"
COL_USAGE = "usage_data"

HISTORY_COLLECTIONS = (COL_PRODUCTION, COL_TURNAROUND, COL_BYPASS, COL_USAGE)

# Snapshot documents: replaced wholesale on every upload.
DOC_PRODUCT_USAGE = "product_usage"
DOC_PRODUCT_WASTAGE = "product_wastage"
DOC_DETAILED_WASTAGE = "detailed_wastage"
DOC_STOCK_DOSES = "stock_doses"
