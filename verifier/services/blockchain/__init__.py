"""
Blockchain services module.

Read-only chain access for deposit verification: JSON-RPC client,
Transfer log decoding, confirmation filtering and deposit scanning.
"""

from .confirmations import filter_confirmed
from .log_decoder import TransferEvent, decode_transfer_log, decode_transfer_logs
from .rpc_client import RpcClient, address_to_topic
from .transfer_scanner import ScanResult, TransferScanner


__all__ = [
    "RpcClient",
    "ScanResult",
    "TransferEvent",
    "TransferScanner",
    "address_to_topic",
    "decode_transfer_log",
    "decode_transfer_logs",
    "filter_confirmed",
]
