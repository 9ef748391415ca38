# kirkidata/core/deps.py
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from kirkidata.core.errors import ApiError
from kirkidata.schemas.auth import Role
from kirkidata.schemas.common import CamelModel
from kirkidata.services.api_client import ApiClient
from kirkidata.services.session import SessionManager


@contextmanager
def rephrase_errors(messages: Mapping[int, str]) -> Iterator[None]:
    """
    將特定 HTTP 狀態的 ApiError 換成較友善的訊息（保留原本的例外類別與狀態）。
    例：{404: "User not found"}
    """
    try:
        yield
    except ApiError as exc:
        friendly = messages.get(exc.status_code) if exc.status_code is not None else None
        if friendly is None:
            raise
        exc.message = friendly
        exc.args = (friendly,)
        raise


def query_params(model: Optional[CamelModel]) -> Dict[str, Any]:
    """把篩選條件轉成 query string 參數，略過未設定的欄位"""
    if model is None:
        return {}
    return model.to_wire()


class EndpointGroup:
    """各端點群組共用：持有 ApiClient 並提供以某個 role 發請求的捷徑"""

    role: Optional[Role] = None

    def __init__(self, client: ApiClient):
        self.client = client

    @property
    def session(self) -> SessionManager:
        if self.role is None:
            raise ValueError(f"{type(self).__name__} has no default role")
        return self.client.session(self.role)

    async def _call(self, endpoint: str, *, method: str = "GET", role: Optional[Role] = None, **kwargs: Any) -> Any:
        return await self.client.request(endpoint, method=method, role=role or self.role, **kwargs)
