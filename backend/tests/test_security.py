# 보안 유닛 테스트 (DB 의존성 없음)
from datetime import timedelta

import jwt
import pytest
from beanie import PydanticObjectId

from videotube.core.config import settings
from videotube.core.exceptions import ApiError
from videotube.core.security import (
    create_refresh_token,
    create_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    to_object_id,
    verify_password,
)

def test_password_hash_and_verify():
    pw = "S3cure!"
    hashed = get_password_hash(pw)
    assert hashed != pw
    assert verify_password(pw, hashed)
    assert not verify_password("wrong", hashed)

def test_create_refresh_token():
    user_id = str(PydanticObjectId())
    token = create_refresh_token(user_id)
    decoded = jwt.decode(token, settings.REFRESH_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert decoded["_id"] == user_id
    assert decoded["type"] == "refresh"
    assert decode_refresh_token(token)["_id"] == user_id

def test_refresh_token_is_not_an_access_token():
    token = create_refresh_token(str(PydanticObjectId()))
    with pytest.raises(ApiError) as exc:
        decode_access_token(token)
    assert exc.value.status_code == 401

def test_access_token_signed_with_wrong_type_is_rejected():
    token = create_token({"_id": "abc", "type": "refresh"}, settings.ACCESS_TOKEN_SECRET, timedelta(minutes=5))
    with pytest.raises(ApiError):
        decode_access_token(token)

def test_expired_token_is_rejected():
    token = create_token({"_id": "abc", "type": "access"}, settings.ACCESS_TOKEN_SECRET, timedelta(seconds=-10))
    with pytest.raises(ApiError) as exc:
        decode_access_token(token)
    assert exc.value.message == "Invalid Access Token"

def test_to_object_id():
    oid = PydanticObjectId()
    assert to_object_id(str(oid)) == oid
    assert to_object_id("not-an-object-id") is None
    assert to_object_id(None) is None
