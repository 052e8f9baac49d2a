"""Pydantic request schemas used by the API.

Each field accepts both its API name and the name used by the HTML form
in `public/formulario.html`. A field counts as missing when it is
absent, null or an empty string.
"""

from pydantic import AliasChoices, BaseModel, Field

# Largest value an SQLite INTEGER column can hold.
SQLITE_MAX_INT = 2**63 - 1


class UserIn(BaseModel):
    """Payload of `POST /usuarios-add`."""
    name: str = Field(min_length=1, validation_alias=AliasChoices('name', 'nome_usuario'))
    email: str = Field(min_length=1, validation_alias=AliasChoices('email', 'email_usuario'))
    password: str = Field(min_length=1, validation_alias=AliasChoices('password', 'texto_mensagem'))


class UserUpdateIn(UserIn):
    """Payload of `POST /usuarios-update`."""
    id: int = Field(gt=0, le=SQLITE_MAX_INT, validation_alias=AliasChoices('id', 'id_usuario'))
