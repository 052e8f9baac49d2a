"""Business logic services used by HTTP controllers.

Services coordinate repositories and translate storage failures into
typed errors, so a failed write can never be mistaken for a success by
the caller. Controllers map these errors to HTTP responses.
"""

import logging
from typing import Dict, List

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from . import models, repositories

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

logger = logging.getLogger("agenda.services")


class StorageError(RuntimeError):
    """The store rejected or failed a statement for a non-domain reason."""


class DuplicateEmailError(ValueError):
    """Another user already owns the submitted email."""


class UserNotFoundError(LookupError):
    """No user exists with the requested id."""


class UserService:
    """Create and update users, hashing passwords on the way in."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, nome: str, email: str, senha: str) -> models.User:
        """Create a new user with a hashed password.

        Raises `DuplicateEmailError` when the email is taken and
        `StorageError` for any other database failure.
        """
        user = models.User(nome=nome, email=email, senha=PWD_CTX.hash(senha))
        try:
            user = self.user_repo.create(user)
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError(email) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError("insert into usuarios failed") from exc
        logger.info("User %s added with id %s", user.nome, user.id)
        return user

    def update(self, user_id: int, nome: str, email: str, senha: str) -> models.User:
        """Overwrite name, email and password of user `user_id`."""
        try:
            user = self.user_repo.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            user = self.user_repo.update(user, nome, email, PWD_CTX.hash(senha))
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError(email) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError("update of usuarios failed") from exc
        logger.info("User %s updated (id %s)", user.nome, user.id)
        return user

    @staticmethod
    def verify_password(password: str, user: models.User) -> bool:
        """Return True if `password` matches the stored hash of `user`."""
        return PWD_CTX.verify(password, user.senha)


class SubjectService:
    """Bulk loading of subjects from parsed records."""
    def __init__(self, session: Session):
        self.session = session
        self.subject_repo = repositories.SubjectRepository(session)

    def import_records(self, records: List[Dict], dry_run: bool = False) -> Dict:
        """Insert one subject per record and return a summary.

        Records without any of `nome`, `descricao` or `professor` are
        reported under `errors` and skipped.
        """
        subjects = []
        errors = []
        for idx, r in enumerate(records):
            if not any(r.get(k) for k in ('nome', 'descricao', 'professor')):
                errors.append({'index': idx, 'error': 'empty subject record'})
                continue
            subjects.append(models.Subject(nome=r.get('nome'), descricao=r.get('descricao'), professor=r.get('professor')))
        if subjects and not dry_run:
            try:
                self.subject_repo.create_many(subjects)
            except SQLAlchemyError as exc:
                self.session.rollback()
                raise StorageError("insert into materias failed") from exc
        return {'created': 0 if dry_run else len(subjects), 'errors': errors}
