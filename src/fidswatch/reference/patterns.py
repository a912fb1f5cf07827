"""Regular expressions for flight numbers and clock times."""

import re

# Whole-cell flight number: carrier (1-3 alnum), optional space, 2-4 digits,
# optional suffix letter.
FLIGHT_NO_RE = re.compile(r"^[A-Z0-9]{1,3}\s*[0-9]{2,4}[A-Z]?$", re.IGNORECASE)

# Split-cell halves: "Q2" | "225".
CARRIER_RE = re.compile(r"^[A-Z0-9]{1,3}$", re.IGNORECASE)
FLIGHT_NUMBER_RE = re.compile(r"^[0-9]{2,4}[A-Z]?$", re.IGNORECASE)

# H:MM or HH:MM anywhere in a string, not glued to other digits.
TIME_TOKEN_RE = re.compile(r"(?<!\d)(\d{1,2}):(\d{2})(?!\d)")

# Strict whole-value time.
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

# Feed times: "13:20", "13.20", "2025-03-01T13:20:00".
FEED_TIME_RE = re.compile(r"(?<!\d)([01]?\d|2[0-3])[:.]([0-5]\d)(?!\d)")
