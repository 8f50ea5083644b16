from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    # JSON en camelCase (brandId, distanceMeters, ...), atributos en snake_case.
    # Los strings llegan recortados: "   " no pasa min_length=1
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True,
                              str_strip_whitespace=True)

class MessageOut(CamelModel):
    message: str | None = None
    success: bool = True
