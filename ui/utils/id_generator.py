"""ID generation helpers for the Streamlit UI.

IDs stay short and human-friendly:
- Staff: S001, S002, ...

"""

from __future__ import annotations

import re
from typing import Iterable


def _next_numeric_suffix(existing: Iterable[str], prefix: str, width: int) -> int:
    # Match e.g. S001
    pat = re.compile(rf"^{re.escape(prefix)}(\d{{{width}}})$")
    nums = []
    for x in existing:
        m = pat.match(x)
        if m:
            nums.append(int(m.group(1)))
    return (max(nums) + 1) if nums else 1


def generate_next_id(existing: Iterable[str], *, prefix: str, width: int = 3) -> str:
    """Generate the next sequential ID after the ones already in use."""

    n = _next_numeric_suffix(existing, prefix, width)
    return f"{prefix}{n:0{width}d}"


def generate_staff_id(existing: Iterable[str]) -> str:
    return generate_next_id(existing, prefix="S", width=3)

