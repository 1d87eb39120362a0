"""Tencent COS provider implementation."""

from .filesystem import CosFileSystem
