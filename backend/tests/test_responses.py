# 공통 응답 형식 테스트
import json

from videotube.core.exceptions import ApiError, error_response
from videotube.schemas.response import api_response

def test_success_envelope_shape():
    resp = api_response(201, {"id": "1"}, "created")
    assert resp.status_code == 201
    assert json.loads(resp.body) == {
        "statusCode": 201,
        "data": {"id": "1"},
        "message": "created",
        "success": True,
    }

def test_success_flag_follows_status_code():
    body = json.loads(api_response(404, None).body)
    assert body["success"] is False
    assert body["message"] == "Success"

def test_error_envelope_hides_stack_outside_development():
    err = ApiError(409, "conflict", ["username"])
    resp = error_response(err.status_code, err.message, err.errors, err)
    body = json.loads(resp.body)
    assert resp.status_code == 409
    assert body == {
        "statusCode": 409,
        "message": "conflict",
        "success": False,
        "errors": ["username"],
        "stack": "",
    }

def test_api_error_defaults():
    err = ApiError(500)
    assert err.message == "Something went wrong"
    assert err.errors == []
    assert err.success is False
    assert err.data is None
