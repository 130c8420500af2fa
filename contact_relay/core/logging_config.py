import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO"):
    """Configure root logging for the relay process"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
    # httpx logs every request at INFO, including the SendGrid URL
    logging.getLogger("httpx").setLevel(logging.WARNING)
