# 공통 성공 응답 형식
# - {statusCode, data, message, success}
# - success는 statusCode < 400 일 때 True

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel


class ApiResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int
    data: Any = None
    message: str = "Success"

    @computed_field
    @property
    def success(self) -> bool:
        return self.status_code < 400


def api_response(status_code: int, data: Any = None, message: str = "Success") -> JSONResponse:
    envelope = ApiResponse(status_code=status_code, data=data, message=message)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope, by_alias=True),
    )
