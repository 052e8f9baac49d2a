import pytest
from sqlmodel import Session, select

from agenda import models
from agenda.services import UserService
from conftest import add_user


def test_added_user_is_listed(client):
    r = client.post('/usuarios-add', json={'name': 'Ana', 'email': 'ana@x.com', 'password': 'p1'})
    assert r.status_code == 200
    assert r.text == 'Formulário recebido com sucesso!'

    users = client.get('/usuarios').json()
    assert users == [{'id': 1, 'nome': 'Ana', 'email': 'ana@x.com'}]


def test_html_form_field_names_are_accepted(client):
    form = {'nome_usuario': 'Bruno', 'email_usuario': 'bruno@x.com', 'texto_mensagem': 'segredo'}
    r = client.post('/usuarios-add', data=form)
    assert r.status_code == 200
    assert client.get('/usuarios').json()[0]['nome'] == 'Bruno'


def test_users_are_listed_in_insertion_order(client):
    for name in ('C', 'A', 'B'):
        assert add_user(client, name=name, email=f'{name}@x.com').status_code == 200
    assert [u['nome'] for u in client.get('/usuarios').json()] == ['C', 'A', 'B']


def test_password_is_hashed_and_not_exposed(client, engine):
    add_user(client, password='p1')
    listed = client.get('/usuarios').json()[0]
    assert 'senha' not in listed and 'password' not in listed

    with Session(engine) as session:
        user = session.exec(select(models.User)).one()
    assert user.senha != 'p1'
    assert UserService.verify_password('p1', user)


@pytest.mark.parametrize('missing', ['name', 'email', 'password'])
@pytest.mark.parametrize('as_empty', [False, True])
def test_add_rejects_missing_fields(client, missing, as_empty):
    payload = {'name': 'Ana', 'email': 'ana@x.com', 'password': 'p1'}
    if as_empty:
        payload[missing] = ''
    else:
        del payload[missing]
    r = client.post('/usuarios-add', data=payload)
    assert r.status_code == 400
    assert r.text == 'Todos os campos são obrigatórios.'
    assert client.get('/usuarios').json() == []


def test_add_rejects_malformed_json(client):
    r = client.post('/usuarios-add', content=b'{not json', headers={'Content-Type': 'application/json'})
    assert r.status_code == 400


def test_duplicate_email_is_rejected(client):
    assert add_user(client).status_code == 200
    r = add_user(client, name='Other Ana')
    assert r.status_code == 409
    assert [u['nome'] for u in client.get('/usuarios').json()] == ['Ana']


def test_update_overwrites_user(client, engine):
    add_user(client)
    r = client.post('/usuarios-update', json={'id': 1, 'name': 'Ana B', 'email': 'ana@x.com', 'password': 'p2'})
    assert r.status_code == 200
    assert r.text == 'Formulário atualizado com sucesso!'

    assert client.get('/usuarios').json() == [{'id': 1, 'nome': 'Ana B', 'email': 'ana@x.com'}]
    with Session(engine) as session:
        user = session.get(models.User, 1)
    assert UserService.verify_password('p2', user)


def test_update_accepts_form_encoded_id(client):
    add_user(client)
    form = {'id_usuario': '1', 'nome_usuario': 'Ana C', 'email_usuario': 'anac@x.com', 'texto_mensagem': 'p3'}
    assert client.post('/usuarios-update', data=form).status_code == 200
    assert client.get('/usuarios').json()[0]['email'] == 'anac@x.com'


def test_update_unknown_id_changes_nothing(client):
    add_user(client)
    r = client.post('/usuarios-update', data={'id': '42', 'name': 'X', 'email': 'x@x.com', 'password': 'p'})
    assert r.status_code == 404
    assert client.get('/usuarios').json() == [{'id': 1, 'nome': 'Ana', 'email': 'ana@x.com'}]


@pytest.mark.parametrize('user_id', [None, '', '0', 'abc', str(2**70)])
def test_update_requires_valid_id(client, user_id):
    add_user(client)
    payload = {'name': 'X', 'email': 'x@x.com', 'password': 'p'}
    if user_id is not None:
        payload['id'] = user_id
    r = client.post('/usuarios-update', data=payload)
    assert r.status_code == 400
    assert client.get('/usuarios').json()[0]['nome'] == 'Ana'


def test_update_huge_json_id_is_a_client_error(client):
    add_user(client)
    r = client.post('/usuarios-update', json={'id': 2**70, 'name': 'X', 'email': 'x@x.com', 'password': 'p'})
    assert r.status_code == 400
    assert r.text == 'Todos os campos são obrigatórios.'


@pytest.mark.parametrize('missing', ['name', 'email', 'password'])
@pytest.mark.parametrize('as_empty', [False, True])
def test_update_rejects_missing_fields(client, missing, as_empty):
    add_user(client)
    payload = {'id': '1', 'name': 'Ana B', 'email': 'anab@x.com', 'password': 'p2'}
    if as_empty:
        payload[missing] = ''
    else:
        del payload[missing]
    r = client.post('/usuarios-update', data=payload)
    assert r.status_code == 400
    assert r.text == 'Todos os campos são obrigatórios.'
    assert client.get('/usuarios').json() == [{'id': 1, 'nome': 'Ana', 'email': 'ana@x.com'}]


def test_update_to_taken_email_is_rejected(client):
    add_user(client)
    add_user(client, name='Bia', email='bia@x.com')
    r = client.post('/usuarios-update', data={'id': '2', 'name': 'Bia', 'email': 'ana@x.com', 'password': 'p'})
    assert r.status_code == 409
    assert client.get('/usuarios').json()[1]['email'] == 'bia@x.com'


def test_read_fault_returns_500_text(client, engine):
    with engine.begin() as conn:
        conn.exec_driver_sql('DROP TABLE usuarios')
    r = client.get('/usuarios')
    assert r.status_code == 500
    assert r.text == 'Erro ao consultar o banco de dados.'


def test_write_fault_is_surfaced(client, engine):
    with engine.begin() as conn:
        conn.exec_driver_sql('DROP TABLE usuarios')
    r = add_user(client)
    assert r.status_code == 500
    assert r.text == 'Erro ao inserir dados no banco de dados.'


def test_update_fault_is_surfaced(client, engine):
    add_user(client)
    with engine.begin() as conn:
        conn.exec_driver_sql('DROP TABLE usuarios')
    r = client.post('/usuarios-update', data={'id': '1', 'name': 'Ana B', 'email': 'ana@x.com', 'password': 'p2'})
    assert r.status_code == 500
    assert r.text == 'Erro ao atualizar dados no banco de dados.'
