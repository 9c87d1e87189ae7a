from typing import Optional

import attrs


@attrs.frozen
class Availability:
    available: bool
    remaining: Optional[int]  # None: unbounded capacity
