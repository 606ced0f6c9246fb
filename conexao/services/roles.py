# conexao/services/roles.py
"""
Motor de roles - autoridade única de permissões e roteamento.

Hierarquia (poder crescente):
visitor < registered_unfinished < banned < member_free_legacy
< member_paid < founder_paid < moderator < super_admin

``banned`` bloqueia qualquer capacidade, independente da posição na ordem.
Toda decisão de acesso do sistema passa por estas funções.
"""
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Role(str, Enum):
    VISITOR = 'visitor'
    REGISTERED_UNFINISHED = 'registered_unfinished'
    BANNED = 'banned'
    MEMBER_FREE_LEGACY = 'member_free_legacy'
    MEMBER_PAID = 'member_paid'
    FOUNDER_PAID = 'founder_paid'
    MODERATOR = 'moderator'
    SUPER_ADMIN = 'super_admin'

    @property
    def power(self):
        """Nível numérico para comparação (maior = mais privilégios)"""
        return _ROLE_POWER[self]


_ROLE_POWER = {
    Role.VISITOR: 0,
    Role.REGISTERED_UNFINISHED: 10,
    Role.BANNED: 20,
    Role.MEMBER_FREE_LEGACY: 30,
    Role.MEMBER_PAID: 40,
    Role.FOUNDER_PAID: 50,
    Role.MODERATOR: 60,
    Role.SUPER_ADMIN: 70,
}

_LEADERSHIP_ROLES = frozenset({Role.FOUNDER_PAID, Role.MODERATOR})
_MOD_ROLES = frozenset({Role.MODERATOR, Role.SUPER_ADMIN})

# Páginas de destino após autenticação
PAGE_HOME = 'home'
PAGE_SOCIAL_HUB = 'social-hub'
PAGE_WAITING_ROOM = 'waiting-room'
PAGE_ACCOUNT_SUSPENDED = 'account-suspended'


def normalize_role(raw):
    """
    Converte o valor armazenado em Role

    Valores desconhecidos, vazios ou None viram ``visitor`` (nunca abrem acesso).
    """
    if isinstance(raw, Role):
        return raw
    if not raw or not isinstance(raw, str):
        return Role.VISITOR

    cleaned = raw.strip().lower()
    try:
        return Role(cleaned)
    except ValueError:
        logger.warning(f"Role desconhecido: {raw!r} -> fallback para 'visitor'")
        return Role.VISITOR


def power(role):
    return normalize_role(role).power


def is_at_least(role, required):
    """Verifica se o role tem poder >= ao role exigido"""
    return power(role) >= power(required)


def is_banned(role, banned=False):
    return bool(banned) or normalize_role(role) is Role.BANNED


def has_app_access(role, banned=False):
    """Pode acessar feed, comunidades e eventos?"""
    if is_banned(role, banned):
        return False
    return is_at_least(role, Role.MEMBER_FREE_LEGACY)


def has_mod_access(role, banned=False):
    if is_banned(role, banned):
        return False
    return normalize_role(role) in _MOD_ROLES


def is_super_admin(role, banned=False):
    if is_banned(role, banned):
        return False
    return normalize_role(role) is Role.SUPER_ADMIN


def has_leadership_access(role, banned=False):
    if is_banned(role, banned):
        return False
    return normalize_role(role) in _LEADERSHIP_ROLES


def needs_leadership_onboarding(role, leadership_onboarding_done, banned=False):
    return has_leadership_access(role, banned) and not leadership_onboarding_done


def is_waiting_approval(role):
    return normalize_role(role) is Role.REGISTERED_UNFINISHED


def default_landing_page(role, banned=False):
    """Página para onde o usuário vai logo após autenticar"""
    if is_banned(role, banned):
        return PAGE_ACCOUNT_SUSPENDED
    if is_waiting_approval(role):
        return PAGE_WAITING_ROOM
    if has_app_access(role):
        return PAGE_SOCIAL_HUB
    return PAGE_HOME
