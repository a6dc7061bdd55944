"""Application service layer.

    from ad_microservice.services import LookupService, LookupResult
"""

from .lookup import LookupResult, LookupService

__all__ = ["LookupResult", "LookupService"]
