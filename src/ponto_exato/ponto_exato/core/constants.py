"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
SESSION_KEY = "ponto_exato_user"
ACTIVE_VIEW_KEY = "ponto_exato_view"

# Horários previstos exibidos na linha do tempo quando não há marcação.
DEFAULT_SCHEDULE = ("08:00", "12:00", "13:00", "18:00")

# Localização usada quando o GPS é negado ou não responde.
FALLBACK_LATITUDE = -23.5505
FALLBACK_LONGITUDE = -46.6333
FALLBACK_ADDRESS = "Localização aproximada (GPS indisponível)"
GPS_ADDRESS = "Localização Validada via GPS"
GEOLOCATION_TIMEOUT_SECONDS = 10.0

KIOSK_ADDRESS = "TOTEM CENTRAL"

DEFAULT_THEME_COLOR = "#0057ff"
DEFAULT_WEEKLY_HOURS = 44
DEFAULT_TOLERANCE_MINUTES = 10
DEFAULT_OVERTIME_PERCENTAGE = 50
DEFAULT_NIGHT_SHIFT_PERCENTAGE = 20
WORKING_DAYS_PER_WEEK = 5

ACCESS_CODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 4

AI_CONTEXT_LIMIT = 20
AI_TIMEOUT_SECONDS = 30.0
AI_FALLBACK_MESSAGE = "Desculpe, tive um problema ao processar sua consulta."
DEFAULT_SYNC_POLL_SECONDS = 2.0
