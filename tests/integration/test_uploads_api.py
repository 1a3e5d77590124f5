"""
Generic file upload endpoint.
"""


def image_upload(path="listings/front.jpg", **data):
    return {
        "files": {"file": ("front.jpg", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
        "data": {"filePath": path, **data},
    }


class TestUpload:
    async def test_upload_returns_url(self, client, tenant_headers, storage):
        response = await client.post("/api/upload", headers=tenant_headers, **image_upload())

        assert response.status_code == 200, response.text
        data = response.json()["data"]
        assert data == {
            "url": "http://testserver/files/property-images/listings/front.jpg",
            "path": "listings/front.jpg",
            "bucket": "property-images",
        }
        stored = storage.root / "property-images" / "listings" / "front.jpg"
        assert stored.read_bytes() == b"\xff\xd8\xff fake jpeg"

    async def test_custom_bucket_and_overwrite(self, client, admin_headers, storage):
        for _ in range(2):
            response = await client.post(
                "/api/upload",
                headers=admin_headers,
                **image_upload("avatars/me.jpg", bucket="avatars"),
            )
            assert response.status_code == 200
        assert response.json()["data"]["bucket"] == "avatars"
        assert (storage.root / "avatars" / "avatars" / "me.jpg").exists()

    async def test_missing_file(self, client, tenant_headers):
        response = await client.post(
            "/api/upload", headers=tenant_headers, data={"filePath": "a/b.jpg"}
        )
        assert response.status_code == 400

    async def test_missing_path(self, client, tenant_headers):
        upload = image_upload()
        upload["data"] = {}
        response = await client.post("/api/upload", headers=tenant_headers, **upload)
        assert response.status_code == 400

    async def test_path_cannot_escape_bucket(self, client, tenant_headers, storage):
        response = await client.post(
            "/api/upload", headers=tenant_headers, **image_upload("../../etc/passwd")
        )
        assert response.status_code == 422
        assert not any(p.is_file() for p in storage.root.rglob("*"))

    async def test_requires_authentication(self, client):
        response = await client.post("/api/upload", **image_upload())
        assert response.status_code in (401, 403)

    async def test_private_bucket_cannot_be_written(self, client, tenant_headers, storage):
        await storage.upload(
            "tenant-documents", "someone/id.pdf", b"original", upsert=False
        )

        response = await client.post(
            "/api/upload",
            headers=tenant_headers,
            **image_upload("someone/id.pdf", bucket="tenant-documents"),
        )

        assert response.status_code == 403
        stored = storage.root / "tenant-documents" / "someone" / "id.pdf"
        assert stored.read_bytes() == b"original"

    async def test_unknown_bucket_refused_for_admins_too(self, client, admin_headers):
        response = await client.post(
            "/api/upload", headers=admin_headers, **image_upload(bucket="backups")
        )
        assert response.status_code == 403


class TestFileDownload:
    async def test_public_image_served_without_token(self, client, tenant_headers):
        uploaded = await client.post("/api/upload", headers=tenant_headers, **image_upload())
        response = await client.get(uploaded.json()["data"]["url"])

        assert response.status_code == 200
        assert response.content == b"\xff\xd8\xff fake jpeg"

    async def test_private_file_needs_signed_link(self, client, storage):
        await storage.upload("tenant-documents", "u1/id.pdf", b"%PDF secret")

        unsigned = await client.get("/files/tenant-documents/u1/id.pdf")
        assert unsigned.status_code == 401

        signed = await storage.signed_url("tenant-documents", "u1/id.pdf", 60)
        response = await client.get(signed)
        assert response.status_code == 200
        assert response.content == b"%PDF secret"

    async def test_token_is_bound_to_one_object(self, client, storage):
        await storage.upload("tenant-documents", "u1/id.pdf", b"mine")
        await storage.upload("tenant-documents", "u2/id.pdf", b"theirs")

        signed = await storage.signed_url("tenant-documents", "u1/id.pdf", 60)
        token = signed.split("?token=")[1]
        response = await client.get(
            "/files/tenant-documents/u2/id.pdf", params={"token": token}
        )
        assert response.status_code == 401

    async def test_expired_link_rejected(self, client, storage):
        await storage.upload("tenant-documents", "u1/id.pdf", b"%PDF")
        signed = await storage.signed_url("tenant-documents", "u1/id.pdf", -60)

        response = await client.get(signed)
        assert response.status_code == 401

    async def test_missing_file(self, client):
        response = await client.get("/files/property-images/nothing/here.jpg")
        assert response.status_code == 404
