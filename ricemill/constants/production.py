# ricemill/constants/production.py

from decimal import Decimal
from enum import Enum

from ricemill.constants.fci import RICE_QTY

MILL_NAME = "Surya Industries"

RICE_PER_ACK = RICE_QTY  # quintals
MILLERS_DUE_RATE = Decimal("0.01")  # 1% of paddy weight


class RiceType(str, Enum):
    BOILED = "boiled"
    RAW = "raw"


# rice out per quintal of paddy in
OUTTURN_RATES = {
    RiceType.BOILED: Decimal("0.68"),
    RiceType.RAW: Decimal("0.67"),
}


# =====================================================
# BY-PRODUCTS
# =====================================================
class ByProductType(str, Enum):
    HUSK = "husk"
    BRAN_BOILED = "bran-boiled"
    BRAN_RAW = "bran-raw"
    BROKEN_RICE = "broken-rice"
    PARAM = "param"
    REJECTION_RICE = "rejection-rice"
    RE_SORTED_RICE = "re-sorted-rice"
    ASH = "ash"


BY_PRODUCT_NAMES = {
    ByProductType.HUSK: "Rice Husk",
    ByProductType.BRAN_BOILED: "Bran (Boiled)",
    ByProductType.BRAN_RAW: "Bran (Raw)",
    ByProductType.BROKEN_RICE: "Broken Rice",
    ByProductType.PARAM: "Param (Small Broken)",
    ByProductType.REJECTION_RICE: "Rejection Rice",
    ByProductType.RE_SORTED_RICE: "Re-sorted Rice",
    ByProductType.ASH: "Ash",
}

BY_PRODUCT_UNIT = "Qtl"
BY_PRODUCT_DEFAULT_GST = Decimal("5")

# rice productions within this many days either side feed a by-product yield
CORRELATION_WINDOW_DAYS = 7
