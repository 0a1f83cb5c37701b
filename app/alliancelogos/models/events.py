
from dataclasses import dataclass


@dataclass
class NewLogo:
    alliance_id: int
    ticker: str
    logo_since: str
    size: int
