"""Tenantry HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application: the identity webhook gateway plus liveness and
readiness probes.

Usage
-----
Create and run the application::

    from tenantry.api import create_app

    app = create_app()              # settings from the environment
    app = create_app(dependencies)  # injected collaborators

"""

from tenantry.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
