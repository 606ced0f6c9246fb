import json
from conexao import db
from datetime import datetime

class ModerationAction(db.Model):
    """Registro imutável de uma decisão moderativa (só a reversão altera a linha)"""
    __tablename__ = 'moderation_actions'
    __table_args__ = (
        db.Index('ix_moderation_actions_target_user', 'target_user_id', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    moderator_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False)
    target_user_id = db.Column(db.Integer, db.ForeignKey('members.id'))
    # Posts e comunidades vivem fora deste núcleo: apenas o ID
    target_post_id = db.Column(db.Integer)
    target_community_id = db.Column(db.Integer)
    report_id = db.Column(db.Integer, db.ForeignKey('reports.id'))
    action_type = db.Column(db.String(30), nullable=False)
    reason = db.Column(db.Text, nullable=False)
    notes = db.Column(db.Text)
    # JSON array: ["https://...", ...]
    evidence_urls_json = db.Column(db.Text)
    is_reversible = db.Column(db.Boolean, nullable=False, default=False)
    reversed_at = db.Column(db.DateTime)
    reversed_by = db.Column(db.Integer, db.ForeignKey('members.id'))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # Relacionamentos
    moderator = db.relationship('Member', foreign_keys=[moderator_id])
    target_user = db.relationship('Member', foreign_keys=[target_user_id])
    report = db.relationship('Report', backref=db.backref('moderation_actions', lazy='dynamic'))

    @property
    def is_reversed(self):
        return self.reversed_at is not None

    def get_evidence_urls(self):
        """Retorna as URLs de evidência como lista"""
        try:
            return json.loads(self.evidence_urls_json or '[]')
        except (json.JSONDecodeError, TypeError):
            return []

    def to_dict(self):
        return {
            'id': self.id,
            'moderator_id': self.moderator_id,
            'target_user_id': self.target_user_id,
            'target_post_id': self.target_post_id,
            'target_community_id': self.target_community_id,
            'report_id': self.report_id,
            'action_type': self.action_type,
            'reason': self.reason,
            'notes': self.notes,
            'evidence_urls': self.get_evidence_urls(),
            'is_reversible': self.is_reversible,
            'reversed_at': self.reversed_at.isoformat() if self.reversed_at else None,
            'reversed_by': self.reversed_by,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<ModerationAction {self.action_type} #{self.id}>'
