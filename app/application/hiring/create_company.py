"""
Use case: Create the caller's company profile.

Input: CreateCompanyCommand (owner, name, location, website)
Output: Company
Side effects: Persists the company.
Failure cases: DuplicateCompanyError.
"""

import logging

from app.application.hiring.dtos import CreateCompanyCommand
from app.domain.hiring.entities import Company
from app.domain.hiring.errors import DuplicateCompanyError
from app.domain.hiring.ports import CompanyRepository

logger = logging.getLogger(__name__)


class CreateCompanyUseCase:
    """Creates the single company an employer owns."""

    def __init__(self, companies: CompanyRepository) -> None:
        self._companies = companies

    async def execute(self, command: CreateCompanyCommand) -> Company:
        """Run the create-company use case.

        Raises:
            DuplicateCompanyError: If the owner already has a company.
        """
        if await self._companies.get_by_owner(command.owner.id) is not None:
            raise DuplicateCompanyError(command.owner.id)

        company = await self._companies.add(
            Company(
                name=command.name.strip(),
                owner_id=command.owner.id,
                location=command.location,
                website=command.website,
            )
        )
        logger.info("Company %s created by user=%s", company.id, command.owner.id)
        return company
