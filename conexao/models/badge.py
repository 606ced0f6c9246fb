from enum import Enum
from conexao import db
from datetime import datetime


class BadgeType(str, Enum):
    # Concedidos manualmente
    FOUNDING_MEMBER = 'founding_member'
    FIRST_THIRTY = 'first_thirty'
    LIFETIME = 'lifetime'
    FOUNDER = 'founder'
    TERRITORIAL_COORDINATOR = 'territorial_coordinator'
    # Concedidos pelo motor de selos
    CONSISTENCY = 'consistency'
    TERRITORIAL_PRESENCE = 'territorial_presence'
    LEADERSHIP = 'leadership'
    VISIBLE_PRESENCE = 'visible_presence'


BADGE_CATALOG = {
    BadgeType.FOUNDING_MEMBER: {'label': 'Núcleo Inicial', 'description': 'Membro desde o início da plataforma'},
    BadgeType.FIRST_THIRTY: {'label': '30 Primeiros', 'description': 'Entre os 30 primeiros membros'},
    BadgeType.LIFETIME: {'label': 'Vitalício', 'description': 'Acesso vitalício gratuito'},
    BadgeType.FOUNDER: {'label': 'Founder', 'description': 'Fundador(a) de comunidade'},
    BadgeType.TERRITORIAL_COORDINATOR: {'label': 'Coordenador', 'description': 'Coordenador(a) de núcleo territorial'},
    BadgeType.CONSISTENCY: {'label': 'Constância', 'description': '4+ semanas consecutivas de rituais'},
    BadgeType.TERRITORIAL_PRESENCE: {'label': 'Território', 'description': '3+ encontros presenciais'},
    BadgeType.LEADERSHIP: {'label': 'Liderança', 'description': 'Organizou 1+ live ou evento'},
    BadgeType.VISIBLE_PRESENCE: {'label': 'Presença', 'description': '10+ comentários'},
}


class Badge(db.Model):
    __tablename__ = 'user_badges'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'badge_type', name='uq_user_badges_user_badge'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    badge_type = db.Column(db.String(40), nullable=False)
    earned_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    # Alterado apenas por administrador
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    member = db.relationship('Member', backref=db.backref('badges', lazy='dynamic'))

    @property
    def label(self):
        try:
            return BADGE_CATALOG[BadgeType(self.badge_type)]['label']
        except (ValueError, KeyError):
            return self.badge_type

    def __repr__(self):
        return f'<Badge {self.badge_type} user={self.user_id}>'
