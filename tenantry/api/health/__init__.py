"""Liveness and readiness probe resources.

Usage
-----
Import health resources for route registration::

    from tenantry.api.health.resources import HealthResource, ReadyResource
"""
