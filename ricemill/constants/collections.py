# ricemill/constants/collections.py
#
# Collection keys double as the top-level keys of the backup document.

BY_PRODUCTS = "byProducts"
BY_PRODUCT_PRODUCTIONS = "byProductProductions"
BY_PRODUCT_SALES = "byProductSales"
BY_PRODUCT_PAYMENTS = "byProductPayments"
CUSTOMERS = "customers"
PRODUCTS = "products"
SALES = "sales"
PAYMENTS = "payments"
EXPENSES = "expenses"
HAMALI_WORK = "hamaliWork"
HAMALI_PAYMENTS = "hamaliPayments"
LABOUR_WAGES = "labourWages"
SUPERVISOR_SALARIES = "supervisorSalaries"
ELECTRICITY_BILLS = "electricityBills"
FCI_CONSIGNMENTS = "fciConsignments"
LORRY_FREIGHTS = "lorryFreights"
RICE_PRODUCTIONS = "riceProductions"
PADDY_RECORDS = "paddyRecords"
GUNNY_STOCKS = "gunnyStocks"
FRK_STOCKS = "frkStocks"
REXIN_STICKERS = "rexinStickers"
RECONCILIATIONS = "reconciliations"
GUNNY_DISPATCHES = "gunnyDispatches"
GUNNY_USAGE = "gunnyUsage"
FRK_USAGE = "frkUsage"
STICKER_USAGE = "stickerUsage"
PURCHASES = "purchases"
PURCHASE_PAYMENTS = "purchasePayments"
SALES_RECORDS = "salesRecords"
SALES_PAYMENTS = "salesPayments"
VENDORS = "vendors"

LAST_SYNC = "lastSync"


# =====================================================
# BACKUP DOCUMENT
# =====================================================
BACKUP_VERSION = "1.0"

# every collection a backup carries, in document order; the usage logs
# travel with their batches so restores after an import still balance
EXPORT_COLLECTIONS = (
    BY_PRODUCTS,
    BY_PRODUCT_PRODUCTIONS,
    BY_PRODUCT_SALES,
    BY_PRODUCT_PAYMENTS,
    CUSTOMERS,
    PRODUCTS,
    SALES,
    PAYMENTS,
    EXPENSES,
    HAMALI_WORK,
    HAMALI_PAYMENTS,
    LABOUR_WAGES,
    SUPERVISOR_SALARIES,
    ELECTRICITY_BILLS,
    FCI_CONSIGNMENTS,
    LORRY_FREIGHTS,
    PADDY_RECORDS,
    RICE_PRODUCTIONS,
    GUNNY_STOCKS,
    FRK_STOCKS,
    REXIN_STICKERS,
    GUNNY_USAGE,
    FRK_USAGE,
    STICKER_USAGE,
    RECONCILIATIONS,
    GUNNY_DISPATCHES,
    PURCHASES,
    PURCHASE_PAYMENTS,
    SALES_RECORDS,
    SALES_PAYMENTS,
    VENDORS,
)
