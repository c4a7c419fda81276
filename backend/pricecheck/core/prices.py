import math
import re
from typing import Any, Optional

_NOT_NUMERIC = re.compile(r"[^\d.,]")
_LEADING_FLOAT = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_price(value: Any) -> Optional[float]:
    """
    Converts values like "$599.99", "₹1,299.50", "From $499" or 12.5 to float.
    Returns None if not parseable.

    Commas are always thousands separators, so "12,50" becomes 1250.0.
    Only the leading number survives: "1.2.3" parses as 1.2.
    """
    if value is None:
        return None

    cleaned = _NOT_NUMERIC.sub("", str(value)).replace(",", "")
    m = _LEADING_FLOAT.match(cleaned)
    if not m:
        return None

    num = float(m.group(0))
    return num if math.isfinite(num) else None
