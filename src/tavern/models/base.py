import secrets
from datetime import datetime

import pytz
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(pytz.utc)


def new_id() -> str:
    return secrets.token_hex(8)
