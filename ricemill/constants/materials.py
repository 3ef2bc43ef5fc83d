# ricemill/constants/materials.py

from enum import Enum

from ricemill.constants import collections


class MaterialType(str, Enum):
    GUNNY = "gunny"
    STICKER = "sticker"
    FRK = "frk"


class GunnyType(str, Enum):
    NEW_2024_25 = "2024-25-new"
    LEFTOVER_2023_24 = "2023-24-leftover"


BATCH_COLLECTIONS = {
    MaterialType.GUNNY: collections.GUNNY_STOCKS,
    MaterialType.STICKER: collections.REXIN_STICKERS,
    MaterialType.FRK: collections.FRK_STOCKS,
}

USAGE_COLLECTIONS = {
    MaterialType.GUNNY: collections.GUNNY_USAGE,
    MaterialType.STICKER: collections.STICKER_USAGE,
    MaterialType.FRK: collections.FRK_USAGE,
}

# sourceTag given to stock credited back after its batch was pruned
RETURNED_SOURCE_TAG = "returned"
