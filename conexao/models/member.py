from conexao import db
from conexao.services import roles
from datetime import datetime

class Member(db.Model):
    __tablename__ = 'members'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    # Armazenado como texto livre; sempre normalizado via roles.normalize_role
    role = db.Column(db.String(30), nullable=False, default=roles.Role.VISITOR.value)
    # Marcado pelo fluxo de banimento, independente do role
    is_banned = db.Column(db.Boolean, nullable=False, default=False)
    leadership_onboarding_done = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def normalized_role(self):
        return roles.normalize_role(self.role)

    @property
    def power(self):
        return roles.power(self.role)

    @property
    def can_access_app(self):
        return roles.has_app_access(self.role, banned=self.is_banned)

    @property
    def can_moderate(self):
        return roles.has_mod_access(self.role, banned=self.is_banned)

    @property
    def is_super_admin(self):
        return roles.is_super_admin(self.role, banned=self.is_banned)

    @property
    def can_lead(self):
        return roles.has_leadership_access(self.role, banned=self.is_banned)

    @property
    def needs_leadership_onboarding(self):
        return roles.needs_leadership_onboarding(
            self.role, self.leadership_onboarding_done, banned=self.is_banned
        )

    @property
    def is_waiting_approval(self):
        return roles.is_waiting_approval(self.role)

    @property
    def banned(self):
        return roles.is_banned(self.role, banned=self.is_banned)

    @property
    def landing_page(self):
        return roles.default_landing_page(self.role, banned=self.is_banned)

    def __repr__(self):
        return f'<Member {self.email} ({self.role})>'
