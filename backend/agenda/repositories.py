"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table. Repositories
return SQLModel objects and perform commits/refreshes where appropriate;
turning database errors into domain errors is left to the services.
"""

from typing import List, Optional

from sqlmodel import Session, select

from . import models


class UserRepository:
    """Create/read/update operations for `User` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.User]:
        """Return every user in insertion order."""
        return self.session.exec(select(models.User).order_by(models.User.id)).all()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def update(self, user: models.User, nome: str, email: str, senha: str) -> models.User:
        """Overwrite every mutable column of `user` and commit."""
        user.nome = nome
        user.email = email
        user.senha = senha
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user


class SubjectRepository:
    """Read access to `Subject` rows, plus inserts for seeding."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Subject]:
        """Return every subject in insertion order."""
        return self.session.exec(select(models.Subject).order_by(models.Subject.id)).all()

    def create_many(self, subjects: List[models.Subject]) -> List[models.Subject]:
        """Insert several subjects in one commit and return them refreshed."""
        for s in subjects:
            self.session.add(s)
        self.session.commit()
        for s in subjects:
            self.session.refresh(s)
        return subjects
