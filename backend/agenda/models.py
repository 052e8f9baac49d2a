"""SQLModel data models.

Both tables keep the column names of the original study agenda store
(`usuarios`, `materias`), so an existing database file can be opened
as-is. There is no relationship between the two tables.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import text
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """A registered user.

    Fields:
    - `nome`: display name
    - `email`: unique across all users, enforced by the store
    - `senha`: hashed password string (never store plaintext)
    """
    __tablename__ = "usuarios"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    email: str = Field(unique=True, nullable=False)
    senha: str


class Subject(SQLModel, table=True):
    """A study subject. `data_registro` is filled in by the store on insert."""
    __tablename__ = "materias"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: Optional[str] = None
    descricao: Optional[str] = None
    professor: Optional[str] = None
    data_registro: Optional[datetime] = Field(
        default=None,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
