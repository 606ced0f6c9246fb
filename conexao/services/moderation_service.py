# conexao/services/moderation_service.py
"""
Ledger de moderação: log imutável de ações moderativas

Toda decisão privilegiada vira uma linha em ``moderation_actions``.
Linhas nunca são apagadas; a única alteração permitida é a reversão,
feita uma única vez, por super_admin, e só quando a ação é reversível.
"""
import json
import logging
from datetime import datetime

from sqlalchemy import update

from conexao import db
from conexao.constants import (
    ACTION_TARGETS,
    ACTION_TYPES,
    DEFAULT_HISTORY_LIMIT,
    MAX_EVIDENCE_URLS,
    MAX_HISTORY_LIMIT,
    MAX_NOTES_LENGTH,
    MAX_REASON_LENGTH,
    REVERSIBLE_ACTIONS,
)
from conexao.errors import (
    AlreadyApplied,
    AlreadyReversed,
    InvalidArgument,
    NotFound,
    NotReversible,
    RateLimited,
    Unauthorized,
)
from conexao.models import Member, ModerationAction
from conexao.services import roles
from conexao.services.rate_limiter import NullRateLimiter
from conexao.utils.database import read_guard, write_transaction
from conexao.utils.security import clean_text_input, is_valid_url

logger = logging.getLogger(__name__)


class ModerationService:
    """Append, reversão e histórico do ledger"""

    def __init__(self, rate_limiter=None):
        self.rate_limiter = rate_limiter or NullRateLimiter()

    # -- escrita -------------------------------------------------------------

    def build_action(self, actor_id, actor_role, action_type, reason,
                     target_user_id=None, target_post_id=None,
                     target_community_id=None, report_id=None,
                     notes=None, evidence_urls=None, actor_banned=False,
                     consume_quota=True):
        """
        Valida os parâmetros e monta a ação sem persistir

        Usado por ``append`` e pela triagem de denúncias, que precisa gravar a
        ação na mesma transação da mudança de status. Com
        ``consume_quota=False`` o rate limit fica a cargo de quem chama, via
        ``consume_quota``.

        Returns:
            ModerationAction: Instância nova, fora da sessão

        Raises:
            Unauthorized: Ator abaixo de moderator ou banido
            InvalidArgument: Tipo, motivo, notas, evidências ou alvo inválidos
            RateLimited: Limite de ações do ator atingido
        """
        if roles.is_banned(actor_role, actor_banned) or not roles.is_at_least(actor_role, roles.Role.MODERATOR):
            logger.warning(f"Ação moderativa negada: ator {actor_id} com role {actor_role!r}")
            raise Unauthorized('Apenas moderadores podem registrar ações')

        if action_type not in ACTION_TYPES:
            raise InvalidArgument(f'Tipo de ação desconhecido: {action_type!r}')

        cleaned_reason = clean_text_input(reason)
        if not cleaned_reason:
            raise InvalidArgument('Motivo é obrigatório')
        if len(cleaned_reason) > MAX_REASON_LENGTH:
            raise InvalidArgument(f'Motivo excede {MAX_REASON_LENGTH} caracteres')

        cleaned_notes = clean_text_input(notes) or None
        if cleaned_notes and len(cleaned_notes) > MAX_NOTES_LENGTH:
            raise InvalidArgument(f'Notas excedem {MAX_NOTES_LENGTH} caracteres')

        urls = self._validate_evidence(evidence_urls)

        targets = {
            'user': target_user_id,
            'post': target_post_id,
            'community': target_community_id,
            'report': report_id,
        }
        required = ACTION_TARGETS[action_type]
        if targets[required] is None:
            raise InvalidArgument(f"Ação '{action_type}' exige alvo do tipo '{required}'")

        if consume_quota:
            self.consume_quota(actor_id)

        return ModerationAction(
            moderator_id=actor_id,
            target_user_id=target_user_id,
            target_post_id=target_post_id,
            target_community_id=target_community_id,
            report_id=report_id,
            action_type=action_type,
            reason=cleaned_reason,
            notes=cleaned_notes,
            evidence_urls_json=json.dumps(urls) if urls else None,
            is_reversible=REVERSIBLE_ACTIONS[action_type],
            created_at=datetime.utcnow(),
        )

    def append(self, actor_id, actor_role, action_type, reason, **params):
        """
        Registrar nova ação moderativa (LOG IMUTÁVEL)

        Args:
            actor_id (int): Moderador que age
            actor_role (str): Role do moderador
            action_type (str): Um de ACTION_TYPES
            reason (str): Motivo (obrigatório)
            **params: target_user_id, target_post_id, target_community_id,
                report_id, notes, evidence_urls, actor_banned

        Returns:
            ModerationAction: Ação persistida
        """
        action = self.build_action(actor_id, actor_role, action_type, reason, **params)

        with write_transaction('ação moderativa') as session:
            session.add(action)

        logger.info(
            f"Ação moderativa #{action.id} registrada: {action.action_type} "
            f"por {actor_id} (reversível={action.is_reversible})"
        )
        return action

    def reverse(self, actor_id, actor_role, action_id, actor_banned=False):
        """
        Reverter ação (somente super_admin)

        A escrita é um UPDATE condicional em ``reversed_at IS NULL``: com dois
        pedidos simultâneos, só um altera a linha e o outro recebe
        AlreadyReversed.

        Returns:
            ModerationAction: Ação já marcada como revertida

        Raises:
            Unauthorized, NotFound, NotReversible, AlreadyReversed
        """
        if not roles.is_super_admin(actor_role, actor_banned):
            logger.warning(f"Reversão negada: ator {actor_id} com role {actor_role!r}")
            raise Unauthorized('Apenas super_admin pode reverter ações')

        with read_guard('ação moderativa') as session:
            action = session.get(ModerationAction, action_id)
        if action is None:
            raise NotFound(f'Ação {action_id} não encontrada')
        if not action.is_reversible:
            raise NotReversible(f"Ação '{action.action_type}' não é reversível")
        if action.reversed_at is not None:
            raise AlreadyReversed(f'Ação {action_id} já foi revertida')

        if not self._mark_reversed(action_id, actor_id):
            logger.info(f"Reversão concorrente da ação #{action_id}: outro pedido venceu")
            raise AlreadyReversed(f'Ação {action_id} já foi revertida')

        db.session.refresh(action)
        logger.info(f"Ação moderativa #{action_id} revertida por {actor_id}")
        return action

    def _mark_reversed(self, action_id, actor_id):
        """UPDATE condicional; retorna True se esta chamada fez a reversão"""
        with write_transaction('reversão') as session:
            result = session.execute(
                update(ModerationAction)
                .where(
                    ModerationAction.id == action_id,
                    ModerationAction.is_reversible.is_(True),
                    ModerationAction.reversed_at.is_(None),
                )
                .values(reversed_at=datetime.utcnow(), reversed_by=actor_id)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount == 1

    def consume_quota(self, actor_id):
        """Conta uma ação moderativa no rate limiter do ator"""
        allowed, retry_after = self.rate_limiter.hit(actor_id, 'moderation')
        if not allowed:
            raise RateLimited('Muitas ações moderativas em pouco tempo', retry_after=retry_after)

    # -- transições de role --------------------------------------------------

    def change_role(self, actor_id, actor_role, member_id, new_role, reason=None,
                    banned=None, actor_banned=False):
        """
        Transição explícita de role, sempre registrada no ledger

        Cobre aprovação/rejeição de cadastro, promoção, rebaixamento e
        banimento. Moderadores alteram roles comuns; criar, alterar ou
        remover moderator/super_admin exige super_admin.

        O tipo da ação gravada segue a transição: ``user_banned`` quando o
        membro passa a ficar banido, ``founder_demoted`` quando um founder cai
        de poder e ``warning`` nos demais casos. Reverter a ação no ledger não
        desfaz o role.

        Args:
            member_id (int): Membro alterado
            new_role (str): Um dos valores de Role
            reason (str): Motivo; padrão descreve a transição
            banned (bool): Novo valor do flag ``is_banned``. None mantém o
                atual, exceto quando o novo role é ``banned``

        Returns:
            ModerationAction: Ação gravada junto com a alteração

        Raises:
            Unauthorized, InvalidArgument, NotFound, AlreadyApplied, RateLimited
        """
        if not roles.has_mod_access(actor_role, actor_banned):
            logger.warning(f"Troca de role negada: ator {actor_id} com role {actor_role!r}")
            raise Unauthorized('Apenas moderadores podem alterar roles')

        try:
            target_role = roles.Role(new_role)
        except ValueError:
            raise InvalidArgument(f'Role desconhecido: {new_role!r}') from None

        member = self._get_member(member_id)
        current_role = member.normalized_role

        privileged = (roles.Role.MODERATOR, roles.Role.SUPER_ADMIN)
        if (target_role in privileged or current_role in privileged) \
                and not roles.is_super_admin(actor_role, actor_banned):
            logger.warning(f"Troca de role privilegiado negada: ator {actor_id} -> {target_role.value}")
            raise Unauthorized('Apenas super_admin altera roles de moderação')

        if banned is None:
            banned = member.is_banned or target_role is roles.Role.BANNED
        banned = bool(banned)

        if member.role == target_role.value and member.is_banned == banned:
            raise AlreadyApplied(f'Membro {member_id} já está como {target_role.value}')

        now_banned = banned or target_role is roles.Role.BANNED
        was_banned = member.is_banned or current_role is roles.Role.BANNED
        if now_banned and not was_banned:
            action_type = 'user_banned'
        elif current_role is roles.Role.FOUNDER_PAID and target_role.power < current_role.power:
            action_type = 'founder_demoted'
        else:
            action_type = 'warning'

        action = self.build_action(
            actor_id,
            actor_role,
            action_type,
            reason or f'Role alterado de {member.role} para {target_role.value}',
            target_user_id=member.id,
            actor_banned=actor_banned,
        )

        previous_role = member.role
        with write_transaction('troca de role') as session:
            member.role = target_role.value
            member.is_banned = banned
            session.add(member)
            session.add(action)

        logger.info(
            f"Role de {member_id} alterado de {previous_role} para {target_role.value} "
            f"por {actor_id} (ação #{action.id}, banido={banned})"
        )
        return action

    def reset_leadership_onboarding(self, actor_id, actor_role, member_id, reason=None,
                                    actor_banned=False):
        """Obriga o membro a refazer o onboarding de liderança"""
        if not roles.has_mod_access(actor_role, actor_banned):
            raise Unauthorized('Apenas moderadores podem resetar o onboarding')

        member = self._get_member(member_id)
        action = self.build_action(
            actor_id,
            actor_role,
            'warning',
            reason or 'Onboarding de liderança resetado',
            target_user_id=member.id,
            actor_banned=actor_banned,
        )

        with write_transaction('reset de onboarding') as session:
            member.leadership_onboarding_done = False
            session.add(member)
            session.add(action)

        logger.info(f"Onboarding de liderança de {member_id} resetado por {actor_id}")
        return action

    @staticmethod
    def _get_member(member_id):
        with read_guard('membro') as session:
            member = session.get(Member, member_id)
        if member is None:
            raise NotFound(f'Membro {member_id} não encontrado')
        return member

    # -- leitura -------------------------------------------------------------

    def history(self, target_user_id, limit=DEFAULT_HISTORY_LIMIT):
        """
        Histórico de um usuário, mais recente primeiro, incluindo revertidas

        Returns:
            list[ModerationAction]
        """
        limit = self._check_limit(limit)
        with read_guard('histórico de moderação'):
            return (
                ModerationAction.query
                .filter_by(target_user_id=target_user_id)
                .order_by(ModerationAction.created_at.desc(), ModerationAction.id.desc())
                .limit(limit)
                .all()
            )

    def recent(self, limit=DEFAULT_HISTORY_LIMIT, include_reversed=True):
        """Feed global do painel de moderação"""
        limit = self._check_limit(limit)
        query = ModerationAction.query
        if not include_reversed:
            query = query.filter(ModerationAction.reversed_at.is_(None))
        with read_guard('ações recentes'):
            return (
                query
                .order_by(ModerationAction.created_at.desc(), ModerationAction.id.desc())
                .limit(limit)
                .all()
            )

    @staticmethod
    def _check_limit(limit):
        if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
            raise InvalidArgument('limit deve ser um inteiro positivo')
        return min(limit, MAX_HISTORY_LIMIT)

    @staticmethod
    def _validate_evidence(evidence_urls):
        if not evidence_urls:
            return []
        if isinstance(evidence_urls, str):
            evidence_urls = [evidence_urls]
        urls = [u.strip() for u in evidence_urls if isinstance(u, str) and u.strip()]
        if len(urls) > MAX_EVIDENCE_URLS:
            raise InvalidArgument(f'Máximo de {MAX_EVIDENCE_URLS} URLs de evidência')
        invalid = [u for u in urls if not is_valid_url(u)]
        if invalid:
            raise InvalidArgument(f'URL de evidência inválida: {invalid[0]}')
        return urls
