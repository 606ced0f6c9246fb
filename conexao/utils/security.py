from typing import Optional
from urllib.parse import urlparse

from markupsafe import Markup


def strip_html(text: str) -> str:
    """
    Remover todas as tags HTML, retornando texto puro

    Args:
        text: Texto possivelmente com HTML

    Returns:
        Texto sem tags, com entidades decodificadas
    """
    return Markup(text).striptags()

def clean_text_input(text: Optional[str]) -> str:
    """
    Limpar texto livre digitado pelo usuário (trim + remove tags)

    Não trunca: quem chama decide o que fazer com texto acima do limite.

    Args:
        text: Texto original

    Returns:
        Texto limpo ('' se vazio)
    """
    if not text:
        return ''
    return strip_html(str(text).strip()).strip()

def is_valid_url(url: str) -> bool:
    """
    Validar URL de evidência (apenas http/https com host)

    Args:
        url: URL informada

    Returns:
        True se a URL for aceitável
    """
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)

def rate_limit_key(identifier, action: str) -> str:
    """
    Gerar chave para rate limiting

    Args:
        identifier: ID do ator
        action: Nome da ação limitada

    Returns:
        Chave formatada
    """
    return f"rate_limit:{action}:{identifier}"
