from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class QuotaModel:
    caller: str                 # Caller identity the quota is tracked for (network address)
    allowed: bool               # Whether the current attempt was admitted
    remaining: int | None       # Attempts left in the current window (never negative), None if the quota store was bypassed
    reset_after: int | None     # Seconds until a fresh quota is granted, None if the quota store was bypassed
# fmt: on
