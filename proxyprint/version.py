"""Application version strings and on-disk format versions."""

JSON_FORMAT_VERSION = "PPP00009"
IMAGE_DB_FORMAT_VERSION = "PPP00002"
CONFIG_FORMAT_VERSION = "PPP00001"
IMAGE_CACHE_FORMAT_TAG = b"PPP00004"

_VERSION: str | None = None
_BUILD_TIME: str | None = None


def proxy_pdf_version() -> str:
    """Return the application version, or a placeholder if it is unknown."""
    return _VERSION if _VERSION is not None else "<unkown version>"


def proxy_pdf_build_time() -> str:
    """Return the build time, or a placeholder if it is unknown."""
    return _BUILD_TIME if _BUILD_TIME is not None else "<unkown build time>"


def image_cache_format_version() -> int:
    """Return the preview cache header: the tag's eight bytes as a little-endian integer."""
    return int.from_bytes(IMAGE_CACHE_FORMAT_TAG, "little")