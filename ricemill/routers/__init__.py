# ricemill/routers/__init__.py

from .inventory.inventory_router import router as inventory_router

from .fci.consignment_router import router as consignment_router

from .ledger.trade_router import router as trade_router
from .ledger.freight_router import router as freight_router
from .ledger.reconciliation_router import router as reconciliation_router

from .payroll.payroll_router import router as payroll_router
from .electricity.electricity_router import router as electricity_router

from .production.production_router import router as production_router
from .production.by_product_router import router as by_product_router

from .backup.backup_router import router as backup_router
from .references.reference_router import router as reference_router


__all__ = [
"inventory_router",

"consignment_router",

"trade_router",
"freight_router",
"reconciliation_router",

"payroll_router",
"electricity_router",

"production_router",
"by_product_router",

"backup_router",
"reference_router",
]
