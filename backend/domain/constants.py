"""
Domain constants used across services/routers.
"""

# Public identifiers generated at creation time
ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_HEX_LENGTH = 8
TRANSACTION_ID_PREFIX = "TXN-"
TRANSACTION_ID_HEX_LENGTH = 12

# Reviews
MIN_RATING = 1
MAX_RATING = 5

# Brazilian postal code (CEP): 8 digits, stored as 00000-000
ZIP_CODE_DIGITS = 8
