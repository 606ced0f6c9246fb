"""
Erros do motor de confiança.

Cada erro carrega um ``code`` estável para que a camada de interface
escolha a mensagem a exibir.
"""


class TrustError(Exception):
    """Erro base do domínio"""
    code = 'trust_error'


class Unauthorized(TrustError):
    """Ator sem poder suficiente para a operação"""
    code = 'unauthorized'


class InvalidArgument(TrustError):
    """Campo ausente, malformado ou valor fora do enum"""
    code = 'invalid_argument'


class NotFound(TrustError):
    code = 'not_found'


class NotReversible(TrustError):
    """Ação marcada como não reversível na criação"""
    code = 'not_reversible'


class AlreadyApplied(TrustError):
    """O estado já reflete o resultado pedido (no-op para quem chama)"""
    code = 'already_applied'


class AlreadyResolved(AlreadyApplied):
    code = 'already_resolved'


class AlreadyReversed(AlreadyApplied):
    code = 'already_reversed'


class StorageUnavailable(TrustError):
    """Falha do banco durante uma escrita ou leitura"""
    code = 'storage_unavailable'


class RateLimited(TrustError):
    code = 'rate_limited'

    def __init__(self, message, retry_after=0.0):
        super().__init__(message)
        self.retry_after = retry_after
