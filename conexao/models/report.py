# conexao/models/report.py
from conexao import db
from datetime import datetime


class Report(db.Model):
    __tablename__ = 'reports'
    __table_args__ = (
        db.Index('ix_reports_status_created', 'status', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    reporter_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False)
    reported_user_id = db.Column(db.Integer, db.ForeignKey('members.id'))
    reported_content_id = db.Column(db.Integer)
    reported_content_type = db.Column(db.String(20))  # post, comment, message, profile, event, community
    report_type = db.Column(db.String(50), nullable=False)
    severity = db.Column(db.String(20), nullable=False)  # critical, high, medium (derivada do tipo)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='pending')  # pending, resolved, dismissed
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    resolved_at = db.Column(db.DateTime)
    resolved_by = db.Column(db.Integer, db.ForeignKey('members.id'))

    reporter = db.relationship('Member', foreign_keys=[reporter_id])
    reported_user = db.relationship('Member', foreign_keys=[reported_user_id])

    @property
    def is_pending(self):
        return self.status == 'pending'

    def to_dict(self):
        return {
            'id': self.id,
            'reporter_id': self.reporter_id,
            'reported_user_id': self.reported_user_id,
            'reported_content_id': self.reported_content_id,
            'reported_content_type': self.reported_content_type,
            'report_type': self.report_type,
            'severity': self.severity,
            'description': self.description,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'resolved_at': self.resolved_at.isoformat() if self.resolved_at else None,
            'resolved_by': self.resolved_by,
        }

    def __repr__(self):
        return f'<Report {self.report_type} - {self.status}>'
