"""Constants for layz_spa."""

from logging import Logger, getLogger

LOGGER: Logger = getLogger(__package__)

DOMAIN = "layz_spa"
MANUFACTURER = "Bestway"

# YAML keys; credentials and settings keys come from the library
CONF_DEVICES = "devices"
CONF_DID = "did"
CONF_PRODUCT_NAME = "product_name"
CONF_BASE_URL = "base_url"
CONF_APP_ID = "app_id"

# Fired on the HA bus for filter pump edges: {"device_id": did, "type": event}
EVENT_LAYZ_SPA = f"{DOMAIN}_event"

# Service: layz_spa.set_filter_pump {did, state}
SERVICE_SET_FILTER_PUMP = "set_filter_pump"
ATTR_STATE = "state"
