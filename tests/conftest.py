# tests/conftest.py
"""
Fixtures compartilhados para todos os testes do motor de confiança
"""
import os
import pytest
from datetime import datetime

# Forçar variáveis de ambiente ANTES de importar a app
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing'

from conexao import create_app, db as _db
from conexao.models import Comment, Event, EventAttendee, Live, Member, RitualLog


@pytest.fixture(scope='function')
def app():
    """Cria a aplicação Flask para testes"""
    app = create_app('config.TestingConfig')
    return app


@pytest.fixture(scope='function')
def db(app):
    """Cria e limpa o banco de dados para cada teste"""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def app_context(app, db):
    """Contexto da aplicação"""
    with app.app_context():
        yield app


def make_member(db, role, email, name=None, **kwargs):
    """Helper para criar membros com um role"""
    member = Member(name=name or email.split('@')[0], email=email, role=role, **kwargs)
    db.session.add(member)
    db.session.commit()
    return member


@pytest.fixture
def member(db):
    """Membro pagante comum"""
    return make_member(db, 'member_paid', 'membro@test.com', 'Membro Teste')


@pytest.fixture
def other_member(db):
    return make_member(db, 'member_free_legacy', 'outro@test.com', 'Outro Membro')


@pytest.fixture
def moderator(db):
    return make_member(db, 'moderator', 'mod@test.com', 'Moderadora')


@pytest.fixture
def super_admin(db):
    return make_member(db, 'super_admin', 'admin@test.com', 'Admin')


@pytest.fixture
def founder(db):
    return make_member(db, 'founder_paid', 'founder@test.com', 'Founder')


def add_rituals(db, user_id, moments):
    """Registra rituais concluídos nos instantes informados"""
    for moment in moments:
        db.session.add(RitualLog(user_id=user_id, completed_at=moment))
    db.session.commit()


def add_attendances(db, user_id, host_id, event_type, count, status='confirmed'):
    """Cria ``count`` eventos do tipo informado com o usuário inscrito"""
    for i in range(count):
        event = Event(host_id=host_id, title=f'Encontro {event_type} {i}', event_type=event_type,
                      starts_at=datetime(2026, 3, 1 + i, 19, 0))
        db.session.add(event)
        db.session.flush()
        db.session.add(EventAttendee(event_id=event.id, user_id=user_id, status=status))
    db.session.commit()


def add_comments(db, user_id, count):
    for i in range(count):
        db.session.add(Comment(author_id=user_id, post_id=1, content=f'Comentário {i}'))
    db.session.commit()


def add_live(db, host_id):
    db.session.add(Live(host_id=host_id, title='Live de boas-vindas'))
    db.session.commit()
