import os

from academy.core.enum import Role
from academy.core.settings import settings

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def test_upload_stores_file_and_returns_url(client, make_user, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    _, headers = await make_user(Role.USER)

    res = await client.post(
        "/api/upload/homeworkImage", files={"file": ("answer.PNG", PNG, "image/png")}, headers=headers
    )
    assert res.status_code == 200
    body = res.json()
    assert body["endpoint"] == "homeworkImage"
    assert body["name"] == "answer.PNG"
    stored = body["url"].rsplit("/", 1)[1]
    assert stored.endswith(".png")
    with open(os.path.join(tmp_path, "homeworkImage", stored), "rb") as f:
        assert f.read() == PNG


async def test_upload_rejections(client, make_user, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    _, headers = await make_user(Role.USER)

    res = await client.post("/api/upload/avatar", files={"file": ("a.png", PNG, "image/png")}, headers=headers)
    assert res.status_code == 400

    res = await client.post(
        "/api/upload/courseImage", files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")}, headers=headers
    )
    assert res.status_code == 400

    too_big = b"\x00" * (4 * 1024 * 1024 + 1)
    res = await client.post(
        "/api/upload/courseImage", files={"file": ("big.png", too_big, "image/png")}, headers=headers
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "File exceeds the 4MB limit"
    assert not os.listdir(os.path.join(tmp_path, "courseImage"))

    res = await client.post("/api/upload/courseImage", files={"file": ("a.png", PNG, "image/png")})
    assert res.status_code == 401


async def test_transaction_image_upload(client, make_user, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    _, headers = await make_user(Role.USER)

    res = await client.post(
        "/api/upload/transactionImage", files={"file": ("receipt.jpg", PNG, "image/jpeg")}, headers=headers
    )
    assert res.status_code == 200
    assert res.json()["endpoint"] == "transactionImage"
    assert len(os.listdir(os.path.join(tmp_path, "transactionImage"))) == 1

    res = await client.post(
        "/api/upload/transactionImage", files={"file": ("receipt.pdf", b"%PDF-1.4", "application/pdf")}, headers=headers
    )
    assert res.status_code == 400
