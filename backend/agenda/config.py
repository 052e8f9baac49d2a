"""Application settings and validation."""

import os
from pathlib import Path

BASE = Path(__file__).resolve().parent.parent


class Settings:
    ENV: str
    LOG_LEVEL: str
    DB_PATH: Path
    PUBLIC_DIR: Path
    INDEX_FILE: str
    HOST: str
    PORT: int
    ALLOW_DEV_CORS: bool

    def __init__(self):
        self.ENV = os.getenv("ENV", "dev").lower()
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.DB_PATH = Path(os.getenv("DB_PATH", str(BASE / "data" / "agendaEstudos.db")))
        self.PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR", str(BASE / "public")))
        self.INDEX_FILE = os.getenv("INDEX_FILE", "formulario.html")
        self.HOST = os.getenv("HOST", "127.0.0.1")
        self.PORT = int(os.getenv("PORT", "3050"))
        self.ALLOW_DEV_CORS = os.getenv("ALLOW_DEV_CORS", "true").lower() == "true"
        self._validate()

    def _validate(self):
        if not 0 < self.PORT < 65536:
            raise RuntimeError(f"PORT must be between 1 and 65535, got {self.PORT}")


settings = Settings()
