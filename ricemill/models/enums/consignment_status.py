# ricemill/models/enums/consignment_status.py
import enum


class ConsignmentStatus(str, enum.Enum):
    in_transit = "in-transit"
    dumping_done = "dumping-done"
    qc_passed = "qc-passed"
    dispatched = "dispatched"
    rejected = "rejected"


TERMINAL_CONSIGNMENT_STATUSES = {
    ConsignmentStatus.dispatched,
    ConsignmentStatus.rejected,
}
