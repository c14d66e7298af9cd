"""
Search queries and the form payloads they turn into.

A Query is built up with chained with_* calls and then turned into exactly one
of two payloads: SearchByLicense when a license number is set, SearchByName
otherwise. Payload keys are the register form's field names.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Union

from siareg.contexts.registry.models import Role, Sector
from siareg.contexts.registry.errors import EmptyQueryError


@dataclass(frozen=True)
class SearchByName:
    endpoint_key = "search_name_url"

    last_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    dob: str = ""
    role: str = ""
    license_sector: str = ""

    def to_params(self) -> Dict[str, str]:
        return {
            "Surname": self.last_name,
            "FirstName": self.first_name,
            "MiddleName": self.middle_name,
            "DateOfBirth": self.dob,
            "Role": self.role,
            "LicenseSector": self.license_sector,
        }


@dataclass(frozen=True)
class SearchByLicense:
    endpoint_key = "search_license_url"

    license_no: str = ""

    def to_params(self) -> Dict[str, str]:
        return {"LicenseNo": self.license_no}


SearchPayload = Union[SearchByName, SearchByLicense]


@dataclass(frozen=True)
class Query:
    """
    Search parameters for the public register.

    Example:
        >>> query = Query().with_last_name("Smith").with_first_name("John")
        >>> licenses = query.search_sync()
    """

    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    role: Optional[str] = None
    license_sector: Optional[str] = None
    license_no: Optional[str] = None

    def with_first_name(self, first_name: str) -> "Query":
        return replace(self, first_name=first_name)

    def with_middle_name(self, middle_name: str) -> "Query":
        return replace(self, middle_name=middle_name)

    def with_last_name(self, last_name: str) -> "Query":
        return replace(self, last_name=last_name)

    def with_date_of_birth(self, date_of_birth: str) -> "Query":
        """Date of birth as the form expects it, e.g. "01/01/1970"."""
        return replace(self, date_of_birth=date_of_birth)

    def with_role(self, role: Union[Role, str]) -> "Query":
        return replace(self, role=str(role))

    def with_license_sector(self, license_sector: Union[Sector, str]) -> "Query":
        return replace(self, license_sector=str(license_sector))

    def with_license_no(self, license_no: str) -> "Query":
        return replace(self, license_no=license_no)

    with_license_number = with_license_no

    def has_any(self) -> bool:
        return any(
            value is not None
            for value in (
                self.first_name,
                self.middle_name,
                self.last_name,
                self.date_of_birth,
                self.role,
                self.license_sector,
                self.license_no,
            )
        )

    def to_search_by_name_payload(self) -> SearchByName:
        return SearchByName(
            last_name=self.last_name or "",
            first_name=self.first_name or "",
            middle_name=self.middle_name or "",
            dob=self.date_of_birth or "",
            role=self.role or "",
            license_sector=self.license_sector or "",
        )

    def to_search_by_license_payload(self) -> SearchByLicense:
        return SearchByLicense(license_no=self.license_no or "")

    def to_payload(self) -> SearchPayload:
        """
        Pick the payload for this query.

        Raises:
            EmptyQueryError: No search parameters were set
        """
        if self.license_no is not None:
            return self.to_search_by_license_payload()
        if self.has_any():
            return self.to_search_by_name_payload()
        raise EmptyQueryError("Query has no search parameters")

    async def search(self, **kwargs):
        """Alias for siareg.search(self, **kwargs)."""
        from siareg.contexts.scraping.orchestration import search

        return await search(self, **kwargs)

    def search_sync(self, **kwargs):
        """Alias for siareg.search_sync(self, **kwargs)."""
        from siareg.contexts.scraping.orchestration import search_sync

        return search_sync(self, **kwargs)
