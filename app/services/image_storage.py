import base64
import binascii
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, NamedTuple

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from app.core.config import Settings
from app.core.exceptions import ImageStorageError, NotFoundError

logger = logging.getLogger(__name__)

PNG = "image/png"
JPEG = "image/jpeg"


class StoredImage(NamedTuple):
    data: bytes
    content_type: str


class ImageStore(ABC):
    """Object storage for check-in signatures and photos."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        ...

    @abstractmethod
    def get(self, key: str) -> StoredImage:
        ...


class InMemoryImageStore(ImageStore):
    """Dictionary-backed store for tests and local development."""

    def __init__(self):
        self._objects: Dict[str, StoredImage] = {}

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self._objects[key] = StoredImage(data=data, content_type=content_type)

    def get(self, key: str) -> StoredImage:
        try:
            return self._objects[key]
        except KeyError:
            raise NotFoundError(f"Image {key} not found")

    def __contains__(self, key: str) -> bool:
        return key in self._objects

    def __len__(self) -> int:
        return len(self._objects)


class AzureBlobImageStore(ImageStore):
    """Azure Blob Storage backend; every call is bounded by the configured timeout."""

    def __init__(self, connection_string: str, container_name: str, timeout: int, retry_total: int = 0):
        self.timeout = timeout
        self.container_name = container_name
        blob_service_client = BlobServiceClient.from_connection_string(
            connection_string,
            connection_timeout=timeout,
            read_timeout=timeout,
            retry_total=retry_total,
        )
        self._container = blob_service_client.get_container_client(container_name)
        self._container_ready = False

    def _ensure_container(self) -> None:
        if self._container_ready:
            return
        try:
            self._container.create_container(timeout=self.timeout)
        except ResourceExistsError:
            pass  # Container already exists
        self._container_ready = True

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._ensure_container()
            blob_client = self._container.get_blob_client(key)
            blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
                timeout=self.timeout,
            )
        except AzureError as e:
            raise ImageStorageError(f"Azure blob upload failed for {key}: {e}") from e

    def get(self, key: str) -> StoredImage:
        try:
            downloader = self._container.get_blob_client(key).download_blob(timeout=self.timeout)
            data = downloader.readall()
            content_type = downloader.properties.content_settings.content_type or JPEG
            return StoredImage(data=data, content_type=content_type)
        except ResourceNotFoundError:
            raise NotFoundError(f"Image {key} not found")
        except AzureError as e:
            raise ImageStorageError(f"Azure blob download failed for {key}: {e}") from e


def create_image_store(settings: Settings) -> ImageStore:
    if settings.storage_configured:
        logger.info(f"Using Azure Blob Storage container '{settings.AZURE_IMAGES_CONTAINER}' for images")
        return AzureBlobImageStore(
            settings.AZURE_STORAGE_CONNECTION_STRING,
            settings.AZURE_IMAGES_CONTAINER,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
            retry_total=settings.STORAGE_RETRY_TOTAL,
        )
    logger.warning("AZURE_STORAGE_CONNECTION_STRING not set - images are kept in process memory")
    return InMemoryImageStore()


def infer_content_type(image_data: str, filename: str) -> str:
    header = image_data.split(",", 1)[0] if "," in image_data else ""
    if header.startswith("data:") and "png" in header.lower():
        return PNG
    if header.startswith("data:") and ("jpeg" in header.lower() or "jpg" in header.lower()):
        return JPEG
    return PNG if filename.lower().endswith(".png") else JPEG


def decode_image_data(image_data: str) -> bytes:
    """Strip any data-URI prefix and decode the base64 payload."""
    payload = image_data.split(",", 1)[1] if "," in image_data else image_data
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageStorageError(f"Image data is not valid base64: {e}") from e


def upload_image(store: ImageStore, image_data: str, filename: str) -> str:
    """Write one image and return its storage key."""
    raw = decode_image_data(image_data)
    key = f"images/{int(time.time() * 1000)}-{filename}"
    content_type = infer_content_type(image_data, filename)

    logger.info(f"Uploading image {key} ({len(raw)} bytes, {content_type})")
    store.put(key, raw, content_type)
    return key
