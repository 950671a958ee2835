# 테스트 공통 설정
# - 설정 모듈 import 전에 필수 환경변수 지정
# - MongoDB 대신 mongomock_motor 사용 (테스트마다 새 인메모리 DB)
# - Cloudinary 업로드/삭제는 unittest.mock 으로 대체

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

_tmp_dir = tempfile.mkdtemp(prefix="videotube_test_")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret-do-not-use-in-production")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret-do-not-use-in-production")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("COOKIE_SECURE", "false")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("UPLOAD_TEMP_DIR", str(Path(_tmp_dir) / "temp"))
os.environ.setdefault("STATIC_DIR", _tmp_dir)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from videotube import db, main  # noqa: E402


class FakeCloudinary:
    """업로드된 파일과 삭제 요청을 기록하는 가짜 Cloudinary"""

    def __init__(self):
        self.uploaded = []
        self.staged_paths = []
        self.destroyed = []
        # n번째 업로드에서 실패시키고 싶을 때 지정 (1부터 시작)
        self.fail_on = None

    def upload(self, path, **kwargs):
        if self.fail_on == len(self.uploaded) + 1:
            raise RuntimeError("upload rejected")
        assert Path(path).exists(), "staged file must exist while uploading"
        self.staged_paths.append(path)
        public_id = f"videotube/{len(self.uploaded) + 1}"
        self.uploaded.append(public_id)
        return {
            "public_id": public_id,
            "secure_url": f"https://res.cloudinary.com/demo/image/upload/{public_id}.png",
        }

    def destroy(self, public_id, **kwargs):
        self.destroyed.append(public_id)
        return {"result": "ok"}


@pytest.fixture
def cloud():
    fake = FakeCloudinary()
    with patch("cloudinary.uploader.upload", side_effect=fake.upload), \
            patch("cloudinary.uploader.destroy", side_effect=fake.destroy):
        yield fake


@pytest.fixture
def client(monkeypatch, cloud):
    mock_client = AsyncMongoMockClient()
    monkeypatch.setattr(main, "connect_db", lambda: db.connect_db(mock_client))
    with TestClient(main.app) as c:
        yield c


def register(client, username="alice", email="alice@example.com", password="S3cure!pw",
             full_name="Alice Kim", cover=False):
    files = {"avatar": ("avatar.png", b"\x89PNG avatar", "image/png")}
    if cover:
        files["coverImage"] = ("cover.png", b"\x89PNG cover", "image/png")
    data = {"username": username, "email": email, "fullName": full_name, "password": password}
    return client.post("/api/v1/users/register", data=data, files=files)


def run(client, async_fn, *args):
    """TestClient 이벤트 루프에서 DB 작업을 실행 (데이터 준비용)"""
    return client.portal.call(async_fn, *args)


def login(client, username="alice", password="S3cure!pw"):
    return client.post("/api/v1/users/login", json={"username": username, "password": password})


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def logged_in(client):
    """alice 가입 + 로그인 후 (client, 로그인 응답 data) 반환"""
    assert register(client).status_code == 201
    resp = login(client)
    assert resp.status_code == 200
    client.cookies.clear()
    return resp.json()["data"]
