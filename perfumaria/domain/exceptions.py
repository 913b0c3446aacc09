from typing import Dict, Optional


class BaseErroCore(Exception):
    """Classe base para todas as exceções dos casos de uso."""
    pass


class DadosInvalidosError(BaseErroCore):
    """Erro levantado quando a validação de um formulário falha.

    ``errors`` traz as mensagens por campo, no mesmo formato devolvido
    pelos validadores de ``perfumaria.domain.policies``.
    """
    def __init__(self, errors: Optional[Dict[str, str]] = None, message: str = "Os dados fornecidos são inválidos."):
        self.errors = errors or {}
        self.message = message
        super().__init__(self.message)


# ===============================================
# ERROS DE PERSISTÊNCIA E ENTIDADE
# ===============================================

class ItemNaoEncontradoError(BaseErroCore):
    """Erro levantado quando um item (genérico) não é encontrado."""
    def __init__(self, message="O item solicitado não foi encontrado."):
        self.message = message
        super().__init__(self.message)


class ProdutoNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, produto_id: str):
        self.produto_id = produto_id
        super().__init__(f"Produto {produto_id} não encontrado.")


class ClienteNaoEncontradoError(ItemNaoEncontradoError):
    def __init__(self, cliente_id: str):
        self.cliente_id = cliente_id
        super().__init__(f"Cliente {cliente_id} não encontrado.")


class VendaNaoEncontradaError(ItemNaoEncontradoError):
    def __init__(self, venda_id: str):
        self.venda_id = venda_id
        super().__init__(f"Venda {venda_id} não encontrada.")


class ParcelaNaoEncontradaError(ItemNaoEncontradoError):
    def __init__(self, parcela_id: str):
        self.parcela_id = parcela_id
        super().__init__(f"Parcela {parcela_id} não encontrada.")


class EstoqueInsuficienteError(BaseErroCore):
    """Erro levantado quando um ajuste deixaria o estoque negativo."""
    def __init__(self, produto_id: str, estoque_atual: float, quantidade_solicitada: float, message=None):
        self.produto_id = produto_id
        self.estoque_atual = estoque_atual
        self.quantidade_solicitada = quantidade_solicitada
        if message is None:
            message = (f"Estoque insuficiente para o produto {produto_id}. "
                       f"Disponível: {estoque_atual:g}, Solicitado: {quantidade_solicitada:g}.")
        super().__init__(message)


class StatusInvalidoError(BaseErroCore):
    """Erro levantado ao tentar definir um status inexistente."""
    def __init__(self, status: str, permitidos=()):
        self.status = status
        message = f"Status inválido: {status}."
        if permitidos:
            message += f" Use um de: {', '.join(permitidos)}."
        super().__init__(message)
