"""
Limites e tabelas fixas do motor de confiança.

Tudo que pode ser ajustado sem mexer nos serviços fica aqui.
"""

# Ledger de moderação
MAX_REASON_LENGTH = 1000
MAX_NOTES_LENGTH = 2000
MAX_EVIDENCE_URLS = 10
DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 500

# Denúncias
MAX_REPORT_DESCRIPTION_LENGTH = 2000
MAX_PENDING_REPORTS = 100

# Selos
CONSISTENCY_MIN_WEEKS = 4
TERRITORIAL_MIN_ATTENDANCES = 3
LEADERSHIP_MIN_HOSTED = 1
VISIBLE_PRESENCE_MIN_COMMENTS = 10

# Rate limits: (tentativas, janela em segundos)
REPORT_RATE_LIMIT = (5, 3600)  # 5 denúncias por hora
MODERATION_RATE_LIMIT = (60, 60)  # 60 ações por minuto


# Tipos de ação moderativa
ACTION_TYPES = (
    'warning',
    'post_removed',
    'comment_removed',
    'user_suspended',
    'user_banned',
    'community_suspended',
    'founder_demoted',
    'report_resolved',
    'report_dismissed',
)

# Política de reversão por tipo de ação.
# Banimento e rebaixamento de founder só se desfazem com nova transição
# explícita de role, nunca revertendo o registro.
REVERSIBLE_ACTIONS = {
    'warning': True,
    'post_removed': True,
    'comment_removed': True,
    'user_suspended': True,
    'user_banned': False,
    'community_suspended': True,
    'founder_demoted': False,
    'report_resolved': True,
    'report_dismissed': True,
}

# Alvo obrigatório por tipo de ação
ACTION_TARGETS = {
    'warning': 'user',
    'post_removed': 'post',
    'comment_removed': 'post',
    'user_suspended': 'user',
    'user_banned': 'user',
    'community_suspended': 'community',
    'founder_demoted': 'user',
    'report_resolved': 'report',
    'report_dismissed': 'report',
}

ACTION_TYPE_LABELS = {
    'warning': 'Advertência',
    'post_removed': 'Post removido',
    'comment_removed': 'Comentário removido',
    'user_suspended': 'Usuário suspenso',
    'user_banned': 'Usuário banido',
    'community_suspended': 'Comunidade suspensa',
    'founder_demoted': 'Founder rebaixado',
    'report_resolved': 'Denúncia resolvida',
    'report_dismissed': 'Denúncia dispensada',
}


# Tipos de denúncia
REPORT_TYPES = (
    'harassment',
    'hate_speech',
    'sexual_content',
    'child_safety',
    'spam',
    'impersonation',
    'self_harm',
    'violence',
    'inappropriate_content',
    'privacy_violation',
    'other',
)

HIGH_SEVERITY_REPORT_TYPES = frozenset({
    'harassment',
    'hate_speech',
    'sexual_content',
    'violence',
    'self_harm',
})

# Ordem de triagem: menor vem primeiro
SEVERITY_RANK = {
    'critical': 0,
    'high': 1,
    'medium': 2,
    'low': 3,
}

REPORTED_CONTENT_TYPES = ('post', 'comment', 'message', 'profile', 'event', 'community')

REPORT_OUTCOMES = ('resolved', 'dismissed')

REPORT_TYPE_LABELS = {
    'child_safety': 'Proteção infantil',
    'harassment': 'Assédio / Perseguição',
    'hate_speech': 'Discurso de ódio',
    'sexual_content': 'Conteúdo sexual não-consentido',
    'violence': 'Violência / Ameaça',
    'self_harm': 'Autolesão / Suicídio',
    'impersonation': 'Falsa identidade',
    'spam': 'Spam / Propaganda',
    'inappropriate_content': 'Conteúdo inadequado',
    'privacy_violation': 'Violação de privacidade',
    'other': 'Outro',
}


# Eventos presenciais contam para o selo de território
IN_PERSON_EVENT_TYPES = ('presencial', 'hibrido')
