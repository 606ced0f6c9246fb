"""
Utilitários para escrita no banco de dados
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from conexao import db
from conexao.errors import StorageUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def write_transaction(context):
    """
    Context manager para uma escrita atômica

    Faz commit ao final do bloco. Qualquer falha do banco desfaz a sessão e
    vira StorageUnavailable; erros de domínio apenas desfazem e propagam.

    Args:
        context: Descrição usada nos logs (ex: 'ação moderativa')
    """
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Erro ao salvar {context}: {e}")
        raise StorageUnavailable(f"Banco indisponível ao salvar {context}") from e
    except Exception:
        db.session.rollback()
        raise


@contextmanager
def read_guard(context):
    """Converte falhas de leitura do banco em StorageUnavailable"""
    try:
        yield db.session
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Erro ao ler {context}: {e}")
        raise StorageUnavailable(f"Banco indisponível ao ler {context}") from e
