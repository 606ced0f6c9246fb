# conexao/services/report_service.py
"""
Triagem de denúncias

A severidade é sempre derivada do tipo da denúncia; nenhum valor vindo do
cliente é aceito. Toda resolução grava, na mesma transação, a ação
correspondente no ledger de moderação.
"""
import logging
from datetime import datetime

from sqlalchemy import case, update

from conexao.constants import (
    HIGH_SEVERITY_REPORT_TYPES,
    MAX_PENDING_REPORTS,
    MAX_REPORT_DESCRIPTION_LENGTH,
    REPORT_OUTCOMES,
    REPORT_TYPES,
    REPORTED_CONTENT_TYPES,
    SEVERITY_RANK,
)
from conexao.errors import (
    AlreadyResolved,
    InvalidArgument,
    NotFound,
    RateLimited,
    Unauthorized,
)
from conexao.models import Report
from conexao.services import roles
from conexao.services.moderation_service import ModerationService
from conexao.services.rate_limiter import NullRateLimiter
from conexao.utils.database import read_guard, write_transaction
from conexao.utils.security import clean_text_input

logger = logging.getLogger(__name__)


def severity_for(report_type):
    """
    Severidade derivada do tipo

    child_safety -> critical; assédio, ódio, conteúdo sexual, violência e
    autolesão -> high; todo o resto -> medium.
    """
    if report_type == 'child_safety':
        return 'critical'
    if report_type in HIGH_SEVERITY_REPORT_TYPES:
        return 'high'
    return 'medium'


class ReportService:
    """Envio, resolução e fila de denúncias pendentes"""

    def __init__(self, ledger=None, rate_limiter=None):
        self.ledger = ledger or ModerationService()
        self.rate_limiter = rate_limiter or NullRateLimiter()

    def submit(self, reporter_id, report_type, reported_user_id=None,
               reported_content_id=None, reported_content_type=None,
               description=None):
        """
        Registrar denúncia pendente

        Returns:
            Report: Denúncia persistida com status 'pending'

        Raises:
            InvalidArgument: Tipo desconhecido, tipo de conteúdo inválido ou
                descrição longa demais
            RateLimited: Denunciante atingiu o limite
        """
        if report_type not in REPORT_TYPES:
            raise InvalidArgument(f'Tipo de denúncia desconhecido: {report_type!r}')

        if reported_content_type is not None and reported_content_type not in REPORTED_CONTENT_TYPES:
            raise InvalidArgument(f'Tipo de conteúdo desconhecido: {reported_content_type!r}')
        if reported_content_id is not None and reported_content_type is None:
            raise InvalidArgument('reported_content_type é obrigatório junto com reported_content_id')

        cleaned_description = clean_text_input(description) or None
        if cleaned_description and len(cleaned_description) > MAX_REPORT_DESCRIPTION_LENGTH:
            raise InvalidArgument(f'Descrição excede {MAX_REPORT_DESCRIPTION_LENGTH} caracteres')

        allowed, retry_after = self.rate_limiter.hit(reporter_id, 'report')
        if not allowed:
            raise RateLimited('Muitas denúncias em pouco tempo', retry_after=retry_after)

        if reported_user_id is not None and reported_user_id == reporter_id:
            # Permitido; fica registrado para decisão de produto
            logger.info(f"Autodenúncia registrada pelo usuário {reporter_id}")

        report = Report(
            reporter_id=reporter_id,
            reported_user_id=reported_user_id,
            reported_content_id=reported_content_id,
            reported_content_type=reported_content_type,
            report_type=report_type,
            severity=severity_for(report_type),
            description=cleaned_description,
            status='pending',
            created_at=datetime.utcnow(),
        )

        with write_transaction('denúncia') as session:
            session.add(report)

        logger.info(f"Denúncia #{report.id} recebida: {report.report_type} ({report.severity})")
        return report

    def resolve(self, actor_id, actor_role, report_id, outcome,
                reason=None, notes=None, actor_banned=False):
        """
        Encerrar denúncia como 'resolved' ou 'dismissed'

        O status só muda se ainda estiver 'pending' (UPDATE condicional), e a
        ação report_resolved/report_dismissed entra no ledger no mesmo commit.

        Returns:
            ModerationAction: Ação gravada no ledger

        Raises:
            Unauthorized, InvalidArgument, NotFound, AlreadyResolved
        """
        if not roles.has_mod_access(actor_role, actor_banned):
            logger.warning(f"Resolução de denúncia negada: ator {actor_id} com role {actor_role!r}")
            raise Unauthorized('Apenas moderadores podem resolver denúncias')

        if outcome not in REPORT_OUTCOMES:
            raise InvalidArgument(f'Resultado inválido: {outcome!r}')

        report = self.get(report_id)
        if report is None:
            raise NotFound(f'Denúncia {report_id} não encontrada')
        if not report.is_pending:
            raise AlreadyResolved(f'Denúncia {report_id} já está {report.status}')

        action_type = 'report_resolved' if outcome == 'resolved' else 'report_dismissed'
        verb = 'resolvida' if outcome == 'resolved' else 'dispensada'
        action = self.ledger.build_action(
            actor_id,
            actor_role,
            action_type,
            reason or f'Denúncia #{report.id} ({report.report_type}) {verb}',
            target_user_id=report.reported_user_id,
            report_id=report.id,
            notes=notes,
            actor_banned=actor_banned,
            consume_quota=False,
        )

        with write_transaction('resolução de denúncia') as session:
            result = session.execute(
                update(Report)
                .where(Report.id == report_id, Report.status == 'pending')
                .values(status=outcome, resolved_at=datetime.utcnow(), resolved_by=actor_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                # Outro moderador encerrou antes; nada é gravado
                logger.info(f"Resolução concorrente da denúncia #{report_id}: outro pedido venceu")
                raise AlreadyResolved(f'Denúncia {report_id} já foi encerrada')
            # A cota só é gasta por quem de fato encerrou a denúncia
            self.ledger.consume_quota(actor_id)
            session.add(action)

        logger.info(f"Denúncia #{report_id} {verb} por {actor_id} (ação #{action.id})")
        return action

    def get(self, report_id):
        with read_guard('denúncia') as session:
            return session.get(Report, report_id)

    def list_pending(self, severity=None, limit=MAX_PENDING_REPORTS):
        """
        Fila de triagem: critical primeiro, depois as mais antigas

        Args:
            severity (str): Filtra por uma severidade
            limit (int): Máximo de itens (teto MAX_PENDING_REPORTS)

        Returns:
            list[Report]
        """
        if severity is not None and severity not in SEVERITY_RANK:
            raise InvalidArgument(f'Severidade desconhecida: {severity!r}')
        if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
            raise InvalidArgument('limit deve ser um inteiro positivo')

        rank = case(SEVERITY_RANK, value=Report.severity, else_=len(SEVERITY_RANK))
        query = Report.query.filter_by(status='pending')
        if severity:
            query = query.filter_by(severity=severity)

        with read_guard('denúncias pendentes'):
            return (
                query
                .order_by(rank, Report.created_at.asc(), Report.id.asc())
                .limit(min(limit, MAX_PENDING_REPORTS))
                .all()
            )

    def count_pending(self):
        with read_guard('denúncias pendentes'):
            return Report.query.filter_by(status='pending').count()
