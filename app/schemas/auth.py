"""Token claims issued by the auth service."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TokenClaims(BaseModel):
    """Validated once at the boundary; only user_id reaches the services."""
    model_config = ConfigDict(extra="ignore")

    # The auth service puts the id in "UserId"; "sub" is accepted for standard JWTs
    user_id: int = Field(validation_alias=AliasChoices("UserId", "sub"), gt=0)
