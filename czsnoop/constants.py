"""
Constants for czsnoop package.

Centralizes magic numbers, wire formats and defaults.
"""

# RZP endpoints (relative to base_url)
RZP_SESSION_PATH = "/rzp/api-c/srv/session/v1/start"
RZP_SUBJECTS_PATH = "/rzp/api3-c/srv/vw/v1/subjekty"
RZP_PERSONS_PATH = "/rzp/api3-c/srv/vw/v1/osoby"
RZP_ADDRESSES_PATH = "/rzp/api3-c/srv/vw/v1/adresy"
RZP_DETAIL_PATH = "/rzp/api3-c/srv/vw/v1/subjekty/isvs/{ref}.xml"

# Date format used inside RZP XML documents
RZP_XML_DATE_FORMAT = "%d.%m.%Y"
# Date format used by RZP JSON endpoints and the CLI
ISO_DATE_FORMAT = "%Y-%m-%d"

# Subject type tag for a natural person (fyzicka osoba)
NATURAL_PERSON_TYPE = "F"

# ICO (identifikacni cislo osoby) is always 8 digits
ICO_LENGTH = 8

# Network defaults
DEFAULT_REQUEST_TIMEOUT = 60.0  # seconds per remote call
DEFAULT_BASE_URL = "https://www.rzp.cz"

# Parallel processing defaults
DEFAULT_DEEP_SEARCH_WORKERS = 6  # bounded pool for detail fetches
