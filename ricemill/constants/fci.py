# ricemill/constants/fci.py

from decimal import Decimal

# Fixed composition of one ACK consignment
REQUIRED_BAGS = 580
REQUIRED_STICKERS = 580
RICE_QTY = Decimal("290")  # quintals
FRK_QTY = Decimal("290")  # kg


# Lorry freight tonnage per consignment type
RICE_CONSIGNMENT_MT = Decimal("58")
BRAN_CONSIGNMENT_MT = Decimal("29")
