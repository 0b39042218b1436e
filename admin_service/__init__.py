"""Multi-tenant administrative backend: super admin, admin, client and user accounts."""

__version__ = "0.1.0"
