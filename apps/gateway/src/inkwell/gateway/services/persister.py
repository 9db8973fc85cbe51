"""ArtifactPersister -- 图片持久化

存储后端在启动时选定一次：对象存储配置齐全时使用 S3 兼容存储（boto3），
否则写入本地上传目录。写入前统一校验图片内容。
"""

import asyncio
from pathlib import Path
from typing import Protocol

import httpx
import structlog
from inkwell.core.config import DOWNLOAD_TIMEOUT_S, StorageConfig
from inkwell.core.exceptions import PersistenceError
from inkwell.provider import InvalidArtifactError, inspect_artifact
from pydantic import BaseModel
from ulid import ULID

log = structlog.get_logger()

EXTENSIONS: dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}

CACHE_CONTROL = "public, max-age=31536000"


class StoredObject(BaseModel):
    """后端写入结果"""

    locator: str
    public_ref: str


class PersistedArtifact(BaseModel):
    """持久化完成的图片"""

    locator: str
    public_ref: str
    size: int
    mime_type: str
    width: int | None = None
    height: int | None = None


class StorageBackend(Protocol):
    """存储后端接口"""

    name: str

    async def put(self, data: bytes, key: str, mime_type: str) -> StoredObject:
        """写入对象并返回定位符与公网地址"""
        ...


class LocalStorageBackend:
    """本地目录存储，文件通过 /uploads 静态路由对外提供"""

    name = "local"

    def __init__(self, uploads_dir: str | Path, public_prefix: str = "/uploads") -> None:
        self.uploads_dir = Path(uploads_dir)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self._public_prefix = public_prefix.rstrip("/")

    async def put(self, data: bytes, key: str, mime_type: str) -> StoredObject:
        path = self.uploads_dir / key
        await asyncio.to_thread(path.write_bytes, data)
        return StoredObject(locator=str(path), public_ref=f"{self._public_prefix}/{key}")


class ObjectStorageBackend:
    """S3 兼容对象存储（Cloudflare R2 等）

    boto3 是同步客户端，调用放到工作线程中执行。
    """

    name = "object_storage"

    def __init__(self, config: StorageConfig, client=None) -> None:
        self._bucket = config.bucket
        self._public_base_url = config.public_base_url.rstrip("/")
        if client is None:
            import boto3

            client = boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key_id.get_secret_value(),
                aws_secret_access_key=config.secret_access_key.get_secret_value(),
                region_name=config.region,
            )
        self._client = client

    async def put(self, data: bytes, key: str, mime_type: str) -> StoredObject:
        await asyncio.to_thread(
            self._client.put_object,
            Bucket=self._bucket,
            Key=key,
            Body=data,
            ContentType=mime_type,
            CacheControl=CACHE_CONTROL,
        )
        return StoredObject(
            locator=f"s3://{self._bucket}/{key}",
            public_ref=f"{self._public_base_url}/{key}",
        )


def select_backend(storage_config: StorageConfig, uploads_dir: str | Path) -> StorageBackend:
    """启动时选择存储后端"""
    if storage_config.is_complete:
        log.info(
            "storage_backend_selected",
            backend=ObjectStorageBackend.name,
            bucket=storage_config.bucket,
        )
        return ObjectStorageBackend(storage_config)
    log.info("storage_backend_selected", backend=LocalStorageBackend.name, path=str(uploads_dir))
    return LocalStorageBackend(uploads_dir)


class ArtifactPersister:
    """图片持久化服务"""

    def __init__(
        self,
        backend: StorageBackend,
        http_client: httpx.AsyncClient | None = None,
        download_timeout_s: float = DOWNLOAD_TIMEOUT_S,
    ) -> None:
        self.backend = backend
        self._http = http_client
        self._download_timeout_s = download_timeout_s

    async def store(self, buffer: bytes, mime_type: str | None = None) -> PersistedArtifact:
        """校验并写入图片，mime_type 仅为声明值

        Raises:
            PersistenceError: 校验失败或后端写入失败
        """
        try:
            artifact = inspect_artifact(buffer)
        except InvalidArtifactError as e:
            raise PersistenceError(f"图片校验失败: {e}", original_error=e) from e

        if mime_type and mime_type != artifact.mime_type:
            log.info("artifact_mime_mismatch", declared=mime_type, detected=artifact.mime_type)

        key = f"{ULID()}.{EXTENSIONS[artifact.mime_type]}"
        try:
            stored = await self.backend.put(artifact.buffer, key, artifact.mime_type)
        except Exception as e:
            log.error(
                "artifact_store_failed",
                backend=self.backend.name,
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceError(f"图片写入失败: {e}", original_error=e) from e

        log.info(
            "artifact_stored",
            backend=self.backend.name,
            key=key,
            mime_type=artifact.mime_type,
            size=artifact.size,
        )
        return PersistedArtifact(
            locator=stored.locator,
            public_ref=stored.public_ref,
            size=artifact.size,
            mime_type=artifact.mime_type,
            width=artifact.width,
            height=artifact.height,
        )

    async def download(self, url: str) -> bytes:
        """下载外部图片

        Raises:
            PersistenceError: 请求失败或超时
        """
        if self._http is None:
            raise PersistenceError("未配置 HTTP 客户端，无法下载外部图片")
        try:
            response = await self._http.get(
                url,
                timeout=self._download_timeout_s,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise PersistenceError(f"图片下载失败: {e}", original_error=e) from e
        return response.content

    async def download_and_store(
        self, url: str, mime_type: str | None = None
    ) -> PersistedArtifact:
        """下载外部图片并持久化

        Raises:
            PersistenceError: 下载、校验或写入失败
        """
        return await self.store(await self.download(url), mime_type)
