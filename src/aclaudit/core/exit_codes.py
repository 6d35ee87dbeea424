from __future__ import annotations

OK = 0
ERR_DEVIATIONS = 1
ERR_CONFIG = 2
ERR_VALIDATION = 3
ERR_INPUT = 4
ERR_INTERNAL = 99
