"""
Models package. `storage` is the process-wide DBStorage; create_app() calls
storage.reload(...) with the configured database URL.
"""
from models.db_storage import DBStorage

storage = DBStorage()
