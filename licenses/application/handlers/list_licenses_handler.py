"""
ListLicensesHandler.

Handler for paging through licenses.
"""
from licenses.application.dto.license_dto import LicenseDTO, LicenseListDTO
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository

MAX_PAGE_SIZE = 100


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    def handle(self, query: ListLicensesQuery) -> LicenseListDTO:
        """
        Handle list licenses query.

        Args:
            query: ListLicensesQuery

        Returns:
            LicenseListDTO for the requested page
        """
        page = max(query.page, 1)
        limit = min(max(query.limit, 1), MAX_PAGE_SIZE)
        licenses, total = self.license_repository.list(page=page, limit=limit)
        return LicenseListDTO(
            page=page,
            limit=limit,
            total=total,
            licenses=[LicenseDTO.from_entity(license) for license in licenses],
        )
