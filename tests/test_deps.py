# tests/test_deps.py
import pytest

from kirkidata.core.deps import query_params, rephrase_errors
from kirkidata.core.errors import ApiError, ServerError
from kirkidata.schemas.user import SearchUsersRequest


def test_rephrase_errors_keeps_class_and_status():
    with pytest.raises(ServerError) as ei:
        with rephrase_errors({500: "Try later"}):
            raise ServerError("boom", 500)
    assert ei.value.message == "Try later"
    assert str(ei.value) == "Try later"
    assert ei.value.status_code == 500


def test_rephrase_errors_ignores_unmapped_status():
    with pytest.raises(ApiError) as ei:
        with rephrase_errors({404: "Not here"}):
            raise ApiError("teapot", 418)
    assert ei.value.message == "teapot"


def test_query_params_drops_unset_fields():
    assert query_params(None) == {}
    assert query_params(SearchUsersRequest(sort_by="createdAt", sort_order="desc")) == {
        "sortBy": "createdAt",
        "sortOrder": "desc",
    }
