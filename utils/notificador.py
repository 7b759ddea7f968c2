"""
Canal de broadcast em tempo real (cozinha/bar)

Fire-and-forget: emitir nunca falha para quem chama e nunca é aguardado
para a consistência da transação. O transporte (websocket etc.) se registra
como assinante.
"""
from typing import Any, Callable, List

from utils.logging_utils import log_warning

EVENTO_NOVO_PEDIDO = "new_order"
EVENTO_PEDIDO_ATUALIZADO = "order_updated"
EVENTO_PEDIDO_CANCELADO = "order_cancelled"

Assinante = Callable[[str, Any], None]


class Notificador:
    def __init__(self):
        self._assinantes: List[Assinante] = []

    def assinar(self, callback: Assinante) -> None:
        self._assinantes.append(callback)

    def cancelar_assinatura(self, callback: Assinante) -> None:
        if callback in self._assinantes:
            self._assinantes.remove(callback)

    def emitir(self, evento: str, payload: Any) -> None:
        for callback in list(self._assinantes):
            try:
                callback(evento, payload)
            except Exception as e:
                log_warning("realtime", f"Falha ao entregar evento {evento}: {e}")
