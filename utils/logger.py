"""Logging utility for the waitlist backend"""
import logging
import os
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure logging once, at import
log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger('waitlist')


def get_logger(component: str) -> logging.Logger:
    """Child logger for one component, e.g. waitlist.intake or waitlist.mail"""
    return logger.getChild(component)


def mask_email(email: str) -> str:
    """Shorten an address for log lines: jane.doe@example.com -> j***@example.com"""
    if not email or '@' not in email:
        return '***'
    local, domain = email.split('@', 1)
    return f"{local[:1]}***@{domain}"


def log_error(message: str, error: Exception = None, traceback_str: str = None):
    """Log error with optional exception and traceback"""
    if error:
        logger.error(f"{message}: {str(error)}", exc_info=error)
    elif traceback_str:
        logger.error(f"{message}\n{traceback_str}")
    else:
        logger.error(message)

def log_warning(message: str):
    logger.warning(message)

def log_info(message: str):
    logger.info(message)

def log_debug(message: str):
    """Log debug (only in development)"""
    logger.debug(message)
