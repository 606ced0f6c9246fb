# conexao/models/activity.py
"""
Logs comportamentais.

Escritos pelo restante da plataforma; o motor de selos apenas lê.
"""
from conexao import db
from datetime import datetime


class RitualLog(db.Model):
    __tablename__ = 'ritual_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    completed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<RitualLog user={self.user_id} @ {self.completed_at}>'


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    host_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    event_type = db.Column(db.String(20), nullable=False, default='online')  # online, presencial, hibrido
    starts_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    attendees = db.relationship('EventAttendee', backref='event', lazy='dynamic')

    def __repr__(self):
        return f'<Event {self.title} ({self.event_type})>'


class EventAttendee(db.Model):
    __tablename__ = 'event_attendees'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default='confirmed')  # confirmed, interested, cancelled
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<EventAttendee event={self.event_id} user={self.user_id} - {self.status}>'


class Live(db.Model):
    __tablename__ = 'lives'

    id = db.Column(db.Integer, primary_key=True)
    host_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    scheduled_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Live {self.title}>'


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    author_id = db.Column(db.Integer, db.ForeignKey('members.id'), nullable=False, index=True)
    post_id = db.Column(db.Integer)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Comment #{self.id} by {self.author_id}>'
