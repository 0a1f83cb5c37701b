from typing import Optional


class AllianceRecord:
    """One stored alliance.

    has_custom_logo is tri-state: None (never confirmed), False, True.
    Only a confirmed True is ever written by the prober, so None and
    False both mean "probe again next run".
    """

    def __init__(
        self,
        id,
        ticker=None,
        start_date=None,
        size=None,
        has_custom_logo=None,
        logo_since=None,
        last_checked=None,
    ):
        self.id = int(id)
        self.ticker = ticker
        self.start_date = start_date
        self.size = size
        self.has_custom_logo = has_custom_logo
        self.logo_since = logo_since
        self.last_checked = last_checked

    @property
    def is_eligible(self) -> bool:
        return bool(self.has_custom_logo and self.logo_since and self.start_date)

    @staticmethod
    def from_esi(alliance_id: int, data: dict) -> "AllianceRecord":
        """Build a fresh record from an ESI alliance detail payload."""
        if not isinstance(data, dict):
            raise ValueError(f"unexpected alliance payload for {alliance_id}: {type(data).__name__}")
        return AllianceRecord(
            alliance_id,
            ticker=data.get("ticker"),
            start_date=data.get("date_founded"),
        )

    def __repr__(self):
        return f"AllianceRecord(id={self.id}, ticker={self.ticker!r}, logo_since={self.logo_since!r})"


def to_bool(value) -> Optional[bool]:
    if value is None:
        return None
    return bool(value)
