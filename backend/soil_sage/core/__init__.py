from soil_sage.core.config import Settings, settings
from soil_sage.core.database import Base, SessionLocal, build_engine, engine, get_db

__all__ = ["Base", "SessionLocal", "Settings", "build_engine", "engine", "get_db", "settings"]
