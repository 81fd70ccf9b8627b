"""Controller de BasicAuth."""

from __future__ import annotations

from itslanguage.controllers._common import BaseController
from itslanguage.exceptions import InvalidArgumentError
from itslanguage.logging import get_logger
from itslanguage.models import BasicAuth

logger = get_logger("controllers.basic_auth")


class BasicAuthController(BaseController):
    async def create_basic_auth(self, basic_auth: BasicAuth) -> BasicAuth:
        """Cria credenciais basic auth para um tenant.

        O backend gera principal e credentials quando omitidos. credentials
        so e devolvido (e sobrescrito) quando gerado pelo backend.
        """
        if not isinstance(basic_auth, BasicAuth):
            raise InvalidArgumentError('basicAuth parameter of type "BasicAuth" is required')

        data = await self._connection.secure_post(
            "/basicauths",
            json=basic_auth.to_api("tenant_id", "principal", "credentials"),
        )
        result = BasicAuth(
            tenant_id=basic_auth.tenant_id,
            principal=data.get("principal", basic_auth.principal),
            credentials=data.get("credentials") or basic_auth.credentials,
            created=data.get("created"),
            updated=data.get("updated"),
        )
        logger.info("basic_auth_created", tenant_id=result.tenant_id, principal=result.principal)
        return result
