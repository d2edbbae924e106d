"""CloudLocker: desktop client for a personal file-storage service."""

__version__ = "0.1.0"
