from . import exceptions
from .app import app
from .config import settings
from .db import Base, BaseRepository, Session
