"""
Configuration settings for the CRM entity API
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configure logging
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///:memory:")
PORT = int(os.getenv("PORT", 8080))

# Pool sizing only applies to PostgreSQL connections
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))

# Table name prefix shared by every entity table
TABLE_PREFIX = "civicrm_"

# Permissions granted to the acting user when check_permissions is on
API_USER_PERMISSIONS = [
    perm.strip()
    for perm in os.getenv("API_USER_PERMISSIONS", "administer CiviCRM").split(",")
    if perm.strip()
]

# Optional components enabled at startup (core entities are always available)
ENABLED_COMPONENTS = [
    component.strip()
    for component in os.getenv("ENABLED_COMPONENTS", "CiviEvent,CiviCase").split(",")
    if component.strip()
]

logger.info(f"Environment: {ENV}")

if DATABASE_URL.startswith("sqlite") and ENV == "PROD":
    logger.warning("DATABASE_URL points at SQLite in PROD - data will not be shared between processes")
