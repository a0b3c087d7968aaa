"""
Configuration management for the Teacher's Notebook backend.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# User data files
HOME_DIR = Path.home()
SETTINGS_FILE = os.path.expanduser(os.getenv("NOTEBOOK_SETTINGS_FILE", str(HOME_DIR / ".notebook_settings.json")))

# Well-known keys inside the settings file
ENDPOINT_URL_KEY = "teacher_app_api_url"
AI_CREDENTIAL_KEY = "teacher_app_ai_key"

# Defaults (used only when nothing has been saved yet)
DEFAULT_ENDPOINT_URL = os.getenv("NOTEBOOK_ENDPOINT_URL", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")

# Validation policy
ENDPOINT_DOMAIN_MARKER = "script.google.com"
MIN_CREDENTIAL_LENGTH = 11

# Roster
GRADES = ("10", "11", "12")
OTHER_GROUP = "Other"

# Network
REQUEST_TIMEOUT = 15  # seconds, roster fetch, submit and AI calls

# AI drafting
AI_MODEL = os.getenv("NOTEBOOK_AI_MODEL", "gemini-2.0-flash")
AI_MIN_INTERVAL = 4.0  # seconds between accepted AI-draft calls
AI_MAX_WORDS = 8
AI_FALLBACK_COMMENT = "Great work, keep it up."

# Notifications
NOTIFICATION_TTL = 5.0  # seconds before a notification auto-dismisses

# Server configuration
HOST = os.getenv("NOTEBOOK_HOST", "0.0.0.0")
PORT = int(os.getenv("NOTEBOOK_PORT", "3000"))
DEBUG = os.getenv("NOTEBOOK_DEBUG", "").lower() in ("1", "true", "yes")


class Config:
    """Application configuration class."""

    def __init__(self):
        self.settings_file = SETTINGS_FILE
        self.default_endpoint_url = DEFAULT_ENDPOINT_URL
        self.default_ai_credential = GEMINI_API_KEY
        self.ai_model = AI_MODEL
        self.ai_min_interval = AI_MIN_INTERVAL
        self.request_timeout = REQUEST_TIMEOUT

    def to_dict(self):
        return {
            "settings_file": self.settings_file,
            "default_endpoint_url": self.default_endpoint_url,
            "ai_model": self.ai_model,
            "ai_min_interval": self.ai_min_interval,
            "request_timeout": self.request_timeout,
        }


# Global config instance
config = Config()
