"""Canal RPC (WAMP sobre WebSocket) usado pelo streaming de gravacoes."""

from itslanguage.rpc.channel import NOT_OPEN_MESSAGE, RPCChannel
from itslanguage.rpc.wamp import WampChannel

__all__ = [
    "NOT_OPEN_MESSAGE",
    "RPCChannel",
    "WampChannel",
]
