"""Platform credential models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AEPConfig(BaseModel):
    """Credentials and scoping for one AEP organization and sandbox.

    Either client credentials (`client_id` + `client_secret`) or a
    pre-generated `auth_token` must be usable; `org_id` is always required.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_id: str = ""
    client_secret: str = ""
    org_id: str = ""
    sandbox: str = "prod"
    sandbox_id: Optional[str] = None
    auth_token: Optional[str] = None
