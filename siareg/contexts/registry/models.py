"""
Domain records for the licensing register.

- License: one immutable record per result card
- Role / Sector: closed vocabularies, with classify_role / classify_sector
  mapping any scraped text onto exactly one variant
"""

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Optional

from siareg.contexts.registry.diagnostics import DiagnosticsSink, default_diagnostics
from siareg.utils.text_processing import vocabulary_key

# Stand-in for a missing or unreadable expiry date
EXPIRY_SENTINEL = date(1970, 1, 1)


class Role(Enum):
    FRONTLINE = "Front Line"
    NON_FRONTLINE = "Non Front Line"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


class Sector(Enum):
    CASH_AND_VALUABLES_IN_TRANSIT = "Cash and Valuables in Transit"
    CLOSE_PROTECTION = "Close Protection"
    DOOR_SUPERVISION = "Door Supervision"
    PUBLIC_SPACE_SURVEILLANCE = "Public Space Surveillance (CCTV)"
    SECURITY_GUARDING = "Security Guarding"
    KEY_HOLDING = "Key Holding"
    VEHICLE_IMMOBILISATION = "Vehicle Immobilisation"
    NON_FRONT_LINE = "Non Front Line"
    NO_SECTOR = ""
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


# Aliases seen on the register (and in older forms) on top of the display values
_ROLE_ALIASES = {
    "frontlinelicence": Role.FRONTLINE,
    "frontlinelicense": Role.FRONTLINE,
    "nonfrontlinelicence": Role.NON_FRONTLINE,
    "nonfrontlinelicense": Role.NON_FRONTLINE,
}

_SECTOR_ALIASES = {
    "cvit": Sector.CASH_AND_VALUABLES_IN_TRANSIT,
    "cctv": Sector.PUBLIC_SPACE_SURVEILLANCE,
    "publicspacesurveillance": Sector.PUBLIC_SPACE_SURVEILLANCE,
    "doorsupervisor": Sector.DOOR_SUPERVISION,
    "securityguard": Sector.SECURITY_GUARDING,
    "keyholder": Sector.KEY_HOLDING,
    "vehicleimmobiliser": Sector.VEHICLE_IMMOBILISATION,
}


def _build_vocabulary(enum_cls, aliases: Dict[str, Enum], skip: tuple) -> Dict[str, Enum]:
    vocabulary = {vocabulary_key(member.value): member for member in enum_cls if member not in skip}
    vocabulary.update(aliases)
    return vocabulary


def _sink(diagnostics: Optional[DiagnosticsSink]) -> DiagnosticsSink:
    return default_diagnostics() if diagnostics is None else diagnostics


ROLE_VOCABULARY = _build_vocabulary(Role, _ROLE_ALIASES, skip=(Role.UNKNOWN,))
SECTOR_VOCABULARY = _build_vocabulary(
    Sector, _SECTOR_ALIASES, skip=(Sector.UNKNOWN, Sector.NO_SECTOR)
)


def classify_role(text: str, diagnostics: Optional[DiagnosticsSink] = None) -> Role:
    """
    Map role text to a Role. Never fails.

    Empty text is Role.UNKNOWN without a diagnostic. Only the caller knows
    whether the cell was absent or blank, so reporting that is left to it
    (assemble_record reports both). Unrecognised non-empty text is
    Role.UNKNOWN and gets reported here.
    """
    key = vocabulary_key(text)
    if not key:
        return Role.UNKNOWN

    role = ROLE_VOCABULARY.get(key)
    if role is None:
        _sink(diagnostics).record_anomaly("Unrecognised license role", value=text)
        return Role.UNKNOWN
    return role


def classify_sector(text: str, diagnostics: Optional[DiagnosticsSink] = None) -> Sector:
    """
    Map sector text to a Sector. Never fails.

    An empty sector is a legitimate state on the register (Sector.NO_SECTOR),
    not an unknown one.
    """
    key = vocabulary_key(text)
    if not key:
        return Sector.NO_SECTOR

    sector = SECTOR_VOCABULARY.get(key)
    if sector is None:
        _sink(diagnostics).record_anomaly("Unrecognised license sector", value=text)
        return Sector.UNKNOWN
    return sector


@dataclass(frozen=True)
class License:
    """A single license record as shown on the public register."""

    first_name: str
    last_name: str
    license_number: str
    role: Role
    sector: Sector
    expiry: date
    status: str
    status_reason: str
    license_conditions: str

    def expires_in(self, today: Optional[date] = None) -> timedelta:
        """Time left until the license expires (negative once expired)."""
        return self.expiry - (today or date.today())

    def remaining_days(self, today: Optional[date] = None) -> int:
        return self.expires_in(today).days

    def to_dict(self) -> dict:
        record = asdict(self)
        record["role"] = self.role.value
        record["sector"] = self.sector.value
        record["expiry"] = self.expiry.isoformat()
        return record

    def __str__(self) -> str:
        return (
            f"First Name: {self.first_name} | "
            f"Last Name: {self.last_name} | "
            f"License Number: {self.license_number} | "
            f"Role: {self.role} | "
            f"Sector: {self.sector} | "
            f"Expiry: {self.expiry.isoformat()} | "
            f"Status: {self.status} | "
            f"Status Reason: {self.status_reason} | "
            f"License Conditions: {self.license_conditions} | "
        )
