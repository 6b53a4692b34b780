"""Domain composition root for the storefront core.

Aggregates, commands, events and handlers register themselves with
``bitshub`` when their modules are imported. ``init_domain`` imports them all
and initialises the domain once. Commands cannot be built before that.

Commands are processed and events delivered synchronously, so a transition
and every reaction to it complete before ``domain.process`` returns.
"""

import importlib

import structlog
from protean.domain import Domain

bitshub = Domain(
    name="bitshub",
    config={
        "command_processing": "sync",
        "event_processing": "sync",
    },
)

logger = structlog.get_logger(__name__)

# Element modules live two levels deep, below what domain traversal scans
ELEMENT_MODULES = (
    "bitshub.catalogue.product",
    "bitshub.catalogue.management",
    "bitshub.identity.user",
    "bitshub.identity.registration",
    "bitshub.identity.session",
    "bitshub.identity.addresses",
    "bitshub.ordering.cart.cart",
    "bitshub.ordering.cart.items",
    "bitshub.ordering.order.events",
    "bitshub.ordering.order.order",
    "bitshub.ordering.order.creation",
    "bitshub.ordering.order.cancellation",
    "bitshub.ordering.order.fulfillment",
    "bitshub.notifications.notification",
    "bitshub.notifications.management",
    "bitshub.notifications.ordering_events",
)

_initialized = False


def init_domain() -> Domain:
    """Register every storefront element and initialise the domain, once."""
    global _initialized

    if not _initialized:
        for module in ELEMENT_MODULES:
            importlib.import_module(module)
        bitshub.init(traverse=False)
        _initialized = True
        logger.debug("Domain initialised", elements=len(ELEMENT_MODULES))
    return bitshub
