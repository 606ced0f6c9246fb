# conexao/services/badge_service.py
"""
Motor de concessão automática de selos

Verifica condições nos logs comportamentais e concede selos em silêncio.
Cada regra é independente: uma falha é registrada em log e as demais
continuam. Concessões são de mão única (nunca revogadas pelo motor) e
idempotentes, garantidas pela constraint única (user_id, badge_type).
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from conexao import db
from conexao.constants import (
    CONSISTENCY_MIN_WEEKS,
    IN_PERSON_EVENT_TYPES,
    LEADERSHIP_MIN_HOSTED,
    TERRITORIAL_MIN_ATTENDANCES,
    VISIBLE_PRESENCE_MIN_COMMENTS,
)
from conexao.errors import InvalidArgument, NotFound, StorageUnavailable, Unauthorized
from conexao.models import Badge, BadgeType, Comment, Event, EventAttendee, Live, RitualLog
from conexao.services import roles
from conexao.utils.database import read_guard, write_transaction

logger = logging.getLogger(__name__)


@dataclass
class EligibilityCheck:
    """Resultado de uma regra de elegibilidade"""

    badge_type: BadgeType
    eligible: bool
    reason: str


# -- utilitários de semana ISO ---------------------------------------------

def iso_week(moment):
    """
    Semana ISO-8601 de um instante: (ano ISO, número da semana)

    Instantes com fuso são convertidos para UTC antes de extrair a data.
    """
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(timezone.utc)
        moment = moment.date()
    iso = moment.isocalendar()
    return iso[0], iso[1]


def _week_monday(week):
    year, number = week
    return date.fromisocalendar(year, number, 1)


def consecutive_weeks(timestamps):
    """
    Quantas semanas ISO consecutivas terminam na semana mais recente

    Uma semana sem registro interrompe a sequência. A comparação usa a
    segunda-feira de cada semana ISO, então anos de 53 semanas e viradas de
    ano não distorcem a contagem.
    """
    mondays = sorted({_week_monday(iso_week(t)) for t in timestamps}, reverse=True)
    if not mondays:
        return 0

    streak = 1
    for newer, older in zip(mondays, mondays[1:]):
        if newer - older != timedelta(weeks=1):
            break
        streak += 1
    return streak


class BadgeService:
    """Regras de elegibilidade, concessão e leitura de selos"""

    def __init__(self):
        self.rules = [
            (BadgeType.CONSISTENCY, self._check_consistency),
            (BadgeType.TERRITORIAL_PRESENCE, self._check_territorial_presence),
            (BadgeType.LEADERSHIP, self._check_leadership),
            (BadgeType.VISIBLE_PRESENCE, self._check_visible_presence),
        ]

    # -- regras --------------------------------------------------------------

    def _check_consistency(self, user_id):
        """Selo Constância: 4+ semanas consecutivas de rituais"""
        rows = (
            db.session.query(RitualLog.completed_at)
            .filter(RitualLog.user_id == user_id)
            .all()
        )
        if not rows:
            return EligibilityCheck(BadgeType.CONSISTENCY, False, '0 rituais registrados')

        streak = consecutive_weeks(row[0] for row in rows)
        return EligibilityCheck(
            BadgeType.CONSISTENCY,
            streak >= CONSISTENCY_MIN_WEEKS,
            f'{streak} semanas consecutivas de rituais',
        )

    def _check_territorial_presence(self, user_id):
        """Selo Território: 3+ encontros presenciais ou híbridos confirmados"""
        count = (
            db.session.query(EventAttendee.id)
            .join(Event, Event.id == EventAttendee.event_id)
            .filter(
                EventAttendee.user_id == user_id,
                EventAttendee.status == 'confirmed',
                Event.event_type.in_(IN_PERSON_EVENT_TYPES),
            )
            .count()
        )
        return EligibilityCheck(
            BadgeType.TERRITORIAL_PRESENCE,
            count >= TERRITORIAL_MIN_ATTENDANCES,
            f'{count} encontros presenciais',
        )

    def _check_leadership(self, user_id):
        """Selo Liderança: organizou ao menos um evento ou live"""
        hosted = (
            Event.query.filter_by(host_id=user_id).count()
            + Live.query.filter_by(host_id=user_id).count()
        )
        eligible = hosted >= LEADERSHIP_MIN_HOSTED
        reason = (
            f'Organizou {hosted} evento(s) ou live(s)' if eligible
            else 'Nenhum evento ou live organizado'
        )
        return EligibilityCheck(BadgeType.LEADERSHIP, eligible, reason)

    def _check_visible_presence(self, user_id):
        """Selo Presença: 10+ comentários"""
        count = Comment.query.filter_by(author_id=user_id).count()
        return EligibilityCheck(
            BadgeType.VISIBLE_PRESENCE,
            count >= VISIBLE_PRESENCE_MIN_COMMENTS,
            f'{count} comentários',
        )

    # -- avaliação -----------------------------------------------------------

    def check_eligibility(self, user_id):
        """
        Roda todas as regras sem conceder nada (auditoria/debug)

        Returns:
            list[EligibilityCheck]
        """
        with read_guard('logs comportamentais'):
            return [check(user_id) for _, check in self.rules]

    def evaluate(self, user_id):
        """
        Executar verificação completa e conceder selos automaticamente

        Seguro para chamadas repetidas: selos já existentes não são
        concedidos de novo.

        Args:
            user_id (int): Membro avaliado

        Returns:
            list[BadgeType]: Selos concedidos nesta chamada
        """
        granted = []

        for badge_type, check in self.rules:
            try:
                result = check(user_id)
                logger.debug(f"Selo {badge_type.value} para {user_id}: {result.eligible} ({result.reason})")
                if result.eligible and self._grant_if_new(user_id, badge_type):
                    granted.append(badge_type)
            except Exception as e:
                db.session.rollback()
                logger.exception(f"Erro ao avaliar selo {badge_type.value} para {user_id}: {e}")

        if granted:
            logger.info(f"Selos concedidos para {user_id}: {[b.value for b in granted]}")
        return granted

    def _grant_if_new(self, user_id, badge_type):
        """
        Conceder selo se ainda não possui (idempotente)

        Returns:
            bool: True se esta chamada criou a concessão
        """
        existing = Badge.query.filter_by(user_id=user_id, badge_type=badge_type.value).first()
        if existing is not None:
            return False

        db.session.add(Badge(
            user_id=user_id,
            badge_type=badge_type.value,
            earned_at=datetime.utcnow(),
            is_active=True,
        ))
        try:
            db.session.commit()
        except IntegrityError:
            # Conflito de unique = outro processo concedeu antes, tudo bem
            db.session.rollback()
            logger.info(f"Selo {badge_type.value} já concedido a {user_id} por outro processo")
            return False
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageUnavailable(f'Falha ao conceder selo {badge_type.value}') from e

        logger.info(f"Selo concedido: {badge_type.value} para {user_id}")
        return True

    # -- leitura -------------------------------------------------------------

    def has_badge(self, user_id, badge_type):
        """Verifica se o usuário tem o selo ativo"""
        badge_type = self._coerce_type(badge_type)
        with read_guard('selos'):
            return Badge.query.filter_by(
                user_id=user_id, badge_type=badge_type.value, is_active=True
            ).first() is not None

    def list_badges(self, user_ids):
        """
        Carregar selos ativos de vários usuários (para listas)

        IDs chegam às vezes como texto (parâmetros de request) e são
        convertidos para o tipo da coluna antes de virar chave.

        Returns:
            dict: user_id (int) -> list[Badge], ordenados por earned_at
        """
        try:
            user_ids = list(dict.fromkeys(int(user_id) for user_id in user_ids or []))
        except (TypeError, ValueError):
            raise InvalidArgument(f'IDs de usuário inválidos: {user_ids!r}') from None
        badge_map = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return badge_map

        with read_guard('selos'):
            badges = (
                Badge.query
                .filter(Badge.user_id.in_(user_ids), Badge.is_active.is_(True))
                .order_by(Badge.earned_at.asc(), Badge.id.asc())
                .all()
            )
        for badge in badges:
            badge_map[badge.user_id].append(badge)
        return badge_map

    # -- administração -------------------------------------------------------

    def set_active(self, actor_role, user_id, badge_type, active, actor_banned=False):
        """
        Ativar/desativar um selo concedido (somente super_admin)

        Um selo desativado continua ocupando a linha única e não é concedido
        de novo pelo motor.
        """
        if not roles.is_super_admin(actor_role, actor_banned):
            raise Unauthorized('Apenas super_admin pode alterar selos')

        badge_type = self._coerce_type(badge_type)
        with write_transaction('selo') as session:
            badge = Badge.query.filter_by(user_id=user_id, badge_type=badge_type.value).first()
            if badge is None:
                raise NotFound(f'Usuário {user_id} não possui o selo {badge_type.value}')
            badge.is_active = bool(active)
            session.add(badge)

        logger.info(f"Selo {badge_type.value} de {user_id} agora ativo={bool(active)}")
        return badge

    @staticmethod
    def _coerce_type(badge_type):
        try:
            return BadgeType(badge_type)
        except ValueError:
            raise InvalidArgument(f'Selo desconhecido: {badge_type!r}') from None
