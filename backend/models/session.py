from dataclasses import dataclass, field
import time


@dataclass
class PurchaseSession:
    level: int                             # level the player died on
    purchased: bool = False                # flips to True once, on a verified payment
    created_at: float = field(default_factory=time.monotonic)

    def to_check_response(self) -> dict[str, object]:
        return {"hasPurchasedContinue": self.purchased, "level": self.level}
