"""Controller de Organisation: criar, buscar e listar organisations."""

from __future__ import annotations

from itslanguage.controllers._common import BaseController, expect_list, require_field
from itslanguage.exceptions import InvalidArgumentError
from itslanguage.logging import get_logger
from itslanguage.models import Organisation

logger = get_logger("controllers.organisation")

_PATH = "/organisations"


class OrganisationController(BaseController):
    async def create_organisation(self, organisation: Organisation) -> Organisation:
        """Cria uma organisation. Sem id, o backend gera um."""
        if not isinstance(organisation, Organisation):
            raise InvalidArgumentError('organisation parameter of type "Organisation" is required')

        data = await self._connection.secure_post(_PATH, json=organisation.to_api("id", "name"))
        created = Organisation.model_validate(data)
        logger.info("organisation_created", organisation_id=created.id)
        return created

    async def get_organisation(self, organisation_id: str | None) -> Organisation:
        require_field(organisation_id, "organisationId")
        data = await self._connection.secure_get(f"{_PATH}/{organisation_id}")
        return Organisation.model_validate(data)

    async def list_organisations(self) -> list[Organisation]:
        data = await self._connection.secure_get(_PATH)
        return [Organisation.model_validate(item) for item in expect_list(data, _PATH)]
