"""Tests for /api/files"""

KEY = "resumes/user_abc/1-cv.pdf"


def test_presigned_url_default_expiry(client, auth_headers, fake_s3):
    fake_s3.add(KEY)
    r = client.post("/api/files/presigned-url", json={"fileKey": KEY}, headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["fileKey"] == KEY
    assert data["expiresIn"] == 3600
    assert "X-Amz-Expires=3600" in data["presignedUrl"]


def test_presigned_url_expiry_is_clamped(client, auth_headers):
    r = client.post("/api/files/presigned-url", json={"fileKey": KEY, "expiresIn": 10_000_000}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["expiresIn"] == 604800


def test_presigned_url_custom_expiry(client, auth_headers):
    r = client.post("/api/files/presigned-url", json={"fileKey": KEY, "expiresIn": 60}, headers=auth_headers)
    assert r.json()["expiresIn"] == 60


def test_presigned_url_foreign_key_is_403(client, auth_headers, fake_s3):
    r = client.post(
        "/api/files/presigned-url",
        json={"fileKey": "resumes/user_xyz/1-cv.pdf"},
        headers=auth_headers,
    )
    assert r.status_code == 403
    assert r.json()["detail"] == "Forbidden: You can only access your own files"
    assert fake_s3.presign_calls == []


def test_presigned_url_rejects_non_positive_expiry(client, auth_headers):
    r = client.post("/api/files/presigned-url", json={"fileKey": KEY, "expiresIn": 0}, headers=auth_headers)
    assert r.status_code == 400


def test_list_files_only_own(client, auth_headers, fake_s3):
    fake_s3.add("resumes/user_abc/1-a.pdf", body=b"aaaa")
    fake_s3.add("resumes/user_abc/2-b.pdf")
    fake_s3.add("resumes/user_abc2/3-c.pdf")
    fake_s3.add("resumes/user_xyz/4-d.pdf")

    r = client.get("/api/files", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert [f["key"] for f in data["files"]] == ["resumes/user_abc/1-a.pdf", "resumes/user_abc/2-b.pdf"]
    assert data["files"][0]["size"] == 4
    assert data["files"][0]["lastModified"] is not None
    assert data["truncated"] is False


def test_list_files_limit(client, auth_headers, fake_s3):
    for i in range(3):
        fake_s3.add(f"resumes/user_abc/{i}-cv.pdf")
    r = client.get("/api/files", params={"limit": 2}, headers=auth_headers)
    data = r.json()
    assert len(data["files"]) == 2
    assert data["truncated"] is True


def test_list_files_requires_auth(client):
    r = client.get("/api/files")
    assert r.status_code == 401
