# tests/test_security.py
"""
Testes das funções de segurança
"""
import pytest

from conexao.utils.security import clean_text_input, is_valid_url, rate_limit_key, strip_html


class TestCleanTextInput:
    """Testes de limpeza de texto livre"""

    def test_trims(self):
        assert clean_text_input('  motivo  ') == 'motivo'

    def test_removes_tags(self):
        assert clean_text_input('<b>spam</b> repetido') == 'spam repetido'

    @pytest.mark.parametrize('value', [None, '', '   ', '<p></p>'])
    def test_empty_values(self, value):
        assert clean_text_input(value) == ''

    def test_does_not_truncate(self):
        text = 'a' * 5000
        assert clean_text_input(text) == text

    def test_strip_html_decodes_entities(self):
        assert strip_html('Tom &amp; Jerry') == 'Tom & Jerry'


class TestIsValidUrl:

    @pytest.mark.parametrize('url', [
        'https://exemplo.com/print.png',
        'http://exemplo.com',
        '  https://exemplo.com/a?b=c  ',
    ])
    def test_valid(self, url):
        assert is_valid_url(url) is True

    @pytest.mark.parametrize('url', [
        None, '', 'exemplo.com', 'ftp://exemplo.com/x', 'javascript:alert(1)',
        'https://', 'data:text/html,oi', 42,
    ])
    def test_invalid(self, url):
        assert is_valid_url(url) is False


class TestRateLimitKey:

    def test_format(self):
        assert rate_limit_key(7, 'report') == 'rate_limit:report:7'

    def test_distinct_per_action(self):
        assert rate_limit_key(7, 'report') != rate_limit_key(7, 'moderation')
