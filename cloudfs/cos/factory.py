"""COS backend factory.

Maps service names to their COS SDK implementations.
``SERVICE_REGISTRY`` is consumed by :func:`cloudfs.factory.filesystem_factory`.
"""

from cloudfs.cos.filesystem import CosFileSystem


# Service registry for COS
SERVICE_REGISTRY: dict[str, type] = {
    "filesystem": CosFileSystem,
}
