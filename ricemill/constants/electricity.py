# ricemill/constants/electricity.py
#
# TGSPDCL HT-II(A) tariff approximation

from decimal import Decimal

BILLING_DEMAND_FACTOR = Decimal("0.8")  # 80% of contract demand
FIXED_CHARGE_PER_KVA = Decimal("475")
ENERGY_CHARGE_PER_UNIT = Decimal("6.70")
FUEL_SURCHARGE_PER_UNIT = Decimal("1.85")
ED_DUTY_RATE = Decimal("0.06")
CUSTOMER_CHARGES = Decimal("250")

PF_THRESHOLD = Decimal("0.95")
PF_PENALTY_RATE = Decimal("0.01")  # 1% per 0.01 fall below threshold
PF_REBATE_RATE = Decimal("0.005")  # 0.5% per 0.01 rise above threshold

DEFAULT_CONTRACT_DEMAND = Decimal("150")

# average consumption of one ACK of rice production
KWH_PER_ACK = Decimal("65")
