# Core module exports
from .config import *
from .database import create_client, create_database_indexes
from .dependencies import get_db, get_wedding_data
