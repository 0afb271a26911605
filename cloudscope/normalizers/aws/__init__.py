"""AWS normalizers. Importing this package registers them."""

from cloudscope.normalizers.aws import compute, iam, messaging, network, security, storage

__all__ = ["compute", "iam", "messaging", "network", "security", "storage"]
