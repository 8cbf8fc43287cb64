"""Pool resources of a cloud-management backend: permissions, quotas and statistics."""

__version__ = "0.1.0"
