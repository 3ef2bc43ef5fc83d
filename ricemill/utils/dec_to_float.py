def decimal_to_number(value):
    """Decimal -> int when integral, float otherwise (JSON documents)."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)
