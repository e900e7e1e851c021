"""Throttle used by the public catalog endpoints."""

from django.conf import settings
from rest_framework.throttling import ScopedRateThrottle


class CatalogScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle whose rate is read from settings on every request.

    The stock class caches `THROTTLE_RATES` at import, which hides
    `override_settings` changes to the `catalog` rate.
    """

    def get_rate(self):
        return settings.REST_FRAMEWORK.get("DEFAULT_THROTTLE_RATES", {}).get(self.scope)
