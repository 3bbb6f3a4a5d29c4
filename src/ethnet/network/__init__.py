"""Network layer: the discovered network aggregate and its config server.

Attributes:
    Network: Typed, queryable view of an enclave with idempotent cleanup.
        See [Network][ethnet.network.network.Network].
    ApacheConfigServer: Genesis and network config file URLs.
"""

from .apache import ApacheConfigServer
from .network import HANDLED_SIGNALS, Network


__all__ = [
    "HANDLED_SIGNALS",
    "ApacheConfigServer",
    "Network",
]
