# kirkidata/schemas/common.py
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Python 端用 snake_case，送上線時轉成 API 的 camelCase"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Envelope(BaseModel, Generic[T]):
    """所有端點共用的回應外殼：{success, message, data, timestamp}"""

    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    timestamp: Optional[str] = None

