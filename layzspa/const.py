"""Constants for layzspa."""

from logging import Logger, getLogger

LOGGER: Logger = getLogger(__package__)

# Model ids (registry keys)
MODEL_AIRJET = "Airjet"
MODEL_HYDROJET_PRO = "Hydrojet_Pro"
DEFAULT_MODEL = MODEL_AIRJET

# Gizwits cloud
HEADER_APP_ID = "X-Gizwits-Application-Id"
HEADER_USER_TOKEN = "X-Gizwits-User-token"
REQUEST_TIMEOUT_SECONDS = 15
# Gizwits error_code values that mean the token is no longer accepted
AUTH_ERROR_CODES = frozenset({9004, 9006, 9015})

# Polling
UPDATE_INTERVAL_SECONDS = 60

# Capabilities shared by all models
CAP_ONOFF = "onoff"
CAP_PUMP_ONOFF = "pump_onoff"
CAP_HEAT_TEMP_REACH = "heat_temp_reach"
CAP_PUMP_STATE = "pump_state"
CAP_HEAT_STATE = "heat_state"
CAP_TEMP_NOW = "temp_now"
CAP_MEASURE_POWER = "measure_power"
CAP_MEASURE_TEMPERATURE = "measure_temperature"
CAP_TARGET_TEMPERATURE = "target_temperature"
CAP_THERMOSTAT_MODE = "thermostat_mode"
CAP_ALARM_GENERIC = "alarm_generic"

# Model-specific capabilities
CAP_MSG_ONOFF = "msg_onoff"
CAP_MASSAGE_MODE = "massage_mode"
CAP_JET_ONOFF = "jet_onoff"

COMMON_CAPABILITIES = (
    CAP_HEAT_TEMP_REACH,
    CAP_PUMP_STATE,
    CAP_HEAT_STATE,
    CAP_TEMP_NOW,
    CAP_MEASURE_POWER,
    CAP_MEASURE_TEMPERATURE,
    CAP_TARGET_TEMPERATURE,
    CAP_THERMOSTAT_MODE,
    CAP_ALARM_GENERIC,
)

# Settings keys
CONF_HEATER_POWER = "heater_power"
CONF_FILTER_PUMP_POWER = "filter_pump_power"
CONF_POWER_CONTROL_ENABLED = "power_control_enabled"
CONF_FILTER_PUMP_CONTROL_ENABLED = "filter_pump_control_enabled"
CONF_WAVE_CONTROL_ENABLED = "wave_control_enabled"

DEFAULT_HEATER_POWER = 2000
DEFAULT_FILTER_PUMP_POWER = 40

# Control capabilities that the user can switch off in settings
CONTROL_SETTINGS = {
    CAP_ONOFF: CONF_POWER_CONTROL_ENABLED,
    CAP_PUMP_ONOFF: CONF_FILTER_PUMP_CONTROL_ENABLED,
    CAP_MSG_ONOFF: CONF_WAVE_CONTROL_ENABLED,
}

# Events
EVENT_FILTER_PUMP_CHANGED = "filter_pump_changed"
EVENT_FILTER_PUMP_TURNED_ON = "filter_pump_turned_on"
EVENT_FILTER_PUMP_TURNED_OFF = "filter_pump_turned_off"

# Thermostat modes
MODE_HEAT = "heat"
MODE_OFF = "off"

ERROR_MESSAGE_PREFIX = "System error(s): "
