"""USPS mail class resolution for stored shipping method names"""

DEFAULT_MAIL_CLASS = "USPS_GROUND_ADVANTAGE"

MAIL_CLASS_MAP = {
    # Ground Advantage
    "ground advantage": "USPS_GROUND_ADVANTAGE",
    "usps ground advantage": "USPS_GROUND_ADVANTAGE",
    "ground": "USPS_GROUND_ADVANTAGE",
    "standard": "USPS_GROUND_ADVANTAGE",
    "standard shipping": "USPS_GROUND_ADVANTAGE",
    "standard shipping (free!)": "USPS_GROUND_ADVANTAGE",
    "free shipping": "USPS_GROUND_ADVANTAGE",
    "economy": "USPS_GROUND_ADVANTAGE",
    # Priority Mail
    "priority mail": "PRIORITY_MAIL",
    "priority": "PRIORITY_MAIL",
    "usps priority": "PRIORITY_MAIL",
    "usps priority mail": "PRIORITY_MAIL",
    "2-day": "PRIORITY_MAIL",
    "2 day": "PRIORITY_MAIL",
    # Priority Mail Express
    "priority mail express": "PRIORITY_MAIL_EXPRESS",
    "express": "PRIORITY_MAIL_EXPRESS",
    "overnight": "PRIORITY_MAIL_EXPRESS",
    "next day": "PRIORITY_MAIL_EXPRESS",
    # Media / Library
    "media mail": "MEDIA_MAIL",
    "library mail": "LIBRARY_MAIL",
}

# Single Piece
DEFAULT_RATE_INDICATOR = "SP"


def resolve_mail_class(shipping_method_name) -> str:
    """Map an order's shipping method name to a USPS mail class."""
    if not shipping_method_name:
        return DEFAULT_MAIL_CLASS
    key = shipping_method_name.strip().lower()
    return MAIL_CLASS_MAP.get(key, DEFAULT_MAIL_CLASS)


def resolve_rate_indicator(mail_class: str) -> str:
    return DEFAULT_RATE_INDICATOR
