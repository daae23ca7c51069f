from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Modèle sérialisé en camelCase, construit indifféremment en camelCase ou snake_case"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_payload(self) -> dict:
        """Forme JSON persistée / échangée (camelCase, valeurs sérialisables)"""
        return self.model_dump(mode="json", by_alias=True)


class ToggleRequest(CamelModel):
    enabled: bool


class MessageResponse(CamelModel):
    message: str
