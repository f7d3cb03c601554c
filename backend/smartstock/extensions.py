# Overview: Flask extension that owns the in-memory inventory context for an app.

from __future__ import annotations

from flask import Flask, current_app

from .context import InventoryContext, build_context
from .services.alert_service import LoggingAlertObserver
from .services.settings_service import InventorySettings

EXTENSION_KEY = "smartstock"


class Inventory:
    """
    Flask-style extension: ``inventory.init_app(app)`` builds (or accepts) an
    InventoryContext and stores it on ``app.extensions``.
    """

    def init_app(self, app: Flask, context: InventoryContext | None = None) -> InventoryContext:
        if context is None:
            context = build_context(
                settings=InventorySettings.from_config(app.config),
                observers=[LoggingAlertObserver(app.logger)],
                logger=app.logger,
            )
        app.extensions[EXTENSION_KEY] = context
        return context

    @property
    def context(self) -> InventoryContext:
        return current_app.extensions[EXTENSION_KEY]


inventory = Inventory()
