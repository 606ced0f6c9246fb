# tests/test_models.py
"""
Testes dos models
"""
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from conexao.models import Badge, BadgeType, BADGE_CATALOG, Member, ModerationAction, Report


class TestMemberModel:
    """Testes do model Member"""

    def test_create_member(self, db):
        member = Member(name='Ana', email='ana@test.com')
        db.session.add(member)
        db.session.commit()
        assert member.id is not None
        assert member.role == 'visitor'
        assert member.is_banned is False

    def test_email_unique(self, db):
        db.session.add(Member(name='A', email='dup@test.com'))
        db.session.commit()
        db.session.add(Member(name='B', email='dup@test.com'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()


class TestModerationActionModel:

    def test_evidence_urls(self, db, moderator, member):
        action = ModerationAction(
            moderator_id=moderator.id, target_user_id=member.id, action_type='warning',
            reason='Teste', is_reversible=True,
            evidence_urls_json='["https://exemplo.com/1.png"]',
        )
        db.session.add(action)
        db.session.commit()
        assert action.get_evidence_urls() == ['https://exemplo.com/1.png']
        assert action.created_at is not None
        assert action.is_reversed is False
        assert action.moderator.id == moderator.id
        assert action.target_user.id == member.id

    @pytest.mark.parametrize('raw', [None, '', 'não é json'])
    def test_evidence_urls_fallback(self, raw):
        assert ModerationAction(evidence_urls_json=raw).get_evidence_urls() == []

    def test_to_dict(self, db, moderator, member):
        action = ModerationAction(
            moderator_id=moderator.id, target_user_id=member.id, action_type='user_suspended',
            reason='Teste', is_reversible=True, created_at=datetime(2026, 4, 1, 10, 0),
        )
        db.session.add(action)
        db.session.commit()
        data = action.to_dict()
        assert data['action_type'] == 'user_suspended'
        assert data['created_at'] == '2026-04-01T10:00:00'
        assert data['reversed_at'] is None
        assert data['evidence_urls'] == []


class TestReportModel:

    def test_defaults_and_dict(self, db, member):
        report = Report(reporter_id=member.id, report_type='spam', severity='medium')
        db.session.add(report)
        db.session.commit()
        assert report.status == 'pending'
        assert report.is_pending is True
        data = report.to_dict()
        assert data['status'] == 'pending'
        assert data['resolved_at'] is None
        assert report.reporter.id == member.id


class TestBadgeModel:

    def test_catalog_covers_every_type(self):
        assert set(BADGE_CATALOG) == set(BadgeType)

    def test_unique_per_user_and_type(self, db, member, other_member):
        db.session.add(Badge(user_id=member.id, badge_type='founder'))
        db.session.add(Badge(user_id=other_member.id, badge_type='founder'))
        db.session.commit()
        assert member.badges.count() == 1

        db.session.add(Badge(user_id=member.id, badge_type='founder'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
