"""Configuration module for the Tavern campaign service.

This module provides centralized configuration management, including directory
paths, database and API server settings, authentication, invite defaults and
chain-minting settings. All configuration values can be overridden via
environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.parent.resolve()

DATA_DIR = Path(os.getenv("TAVERN_DATA_DIR", str(ROOT_DIR / "data")))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "TAVERN_DATABASE_URL", f"sqlite:///{DATA_DIR}/tavern.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))
)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Where unauthenticated join visitors are sent
LOGIN_PATH: str = os.getenv("LOGIN_PATH", "/login")

# Public site used to build password reset links
APP_URL: str = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
PASSWORD_RESET_EXPIRE_MINUTES: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))

# --- Invite Configuration ---

# Minimum entropy per token; longer tokens draw as many bytes as they need
INVITE_TOKEN_BYTES: int = 32
INVITE_TOKEN_LENGTH: int = int(os.getenv("INVITE_TOKEN_LENGTH", "40"))

_DEFAULT_INVITE_DAYS: Optional[str] = os.getenv("DEFAULT_INVITE_EXPIRES_IN_DAYS")
DEFAULT_INVITE_EXPIRES_IN_DAYS: Optional[int] = (
    int(_DEFAULT_INVITE_DAYS) if _DEFAULT_INVITE_DAYS else None
)

# --- Character Configuration ---

ARCHIVE_CONFIRMATION: str = "ARCHIVE"

# --- Chain Minting Configuration ---
# Minting falls back to simulation when any of these are missing.

TAVERN_RPC_URL: str = os.getenv("TAVERN_RPC_URL", "")
TAVERN_MINT_PRIVATE_KEY: str = os.getenv("TAVERN_MINT_PRIVATE_KEY", "")
TAVERN_CHARACTER_MINT_ADDRESS: str = os.getenv("TAVERN_CHARACTER_MINT_ADDRESS", "")
TAVERN_BADGE_MINT_ADDRESS: str = os.getenv("TAVERN_BADGE_MINT_ADDRESS", "")
CHAIN_ID: int = int(os.getenv("CHAIN_ID", "137"))
MINT_GAS_LIMIT: int = int(os.getenv("MINT_GAS_LIMIT", "300000"))
