"""
ListLicensesQuery.

Query to page through licenses, newest first.
"""
from dataclasses import dataclass


@dataclass
class ListLicensesQuery:
    """Query to list licenses."""

    page: int = 1
    limit: int = 25
