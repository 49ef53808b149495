"""
Application constants.

Centralized constants for the deposit verifier.
"""

# ========================================================================
# TOKEN CONSTANTS
# ========================================================================

# Fixed deposit token (BEP-20 on BNB Smart Chain)
DEFAULT_TOKEN_CONTRACT_ADDRESS = "0x1601c48f1178f1f9a9b0be5f5bd7bb20cfd157f3"
DEFAULT_TOKEN_DECIMALS = 18

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = (
    "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
)

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

# RPC call timeout (in seconds)
BLOCKCHAIN_RPC_TIMEOUT = 15.0

# Scanning
DEFAULT_LOOKBACK_BLOCKS = 100000  # ~3-4 days on BSC (3s blocks)
MAX_LOOKBACK_BLOCKS = 1000000
DEFAULT_LOG_CHUNK_SIZE = 5000  # Public BSC nodes reject wider eth_getLogs ranges

# Confirmations
DEFAULT_MIN_CONFIRMATIONS = 5
MAX_MIN_CONFIRMATIONS = 1000

# ========================================================================
# LEDGER CONSTANTS
# ========================================================================

LEDGER_TYPE_DEPOSIT = "deposit"
LEDGER_STATUS_COMPLETED = "completed"
DEPOSIT_DESCRIPTION_TEMPLATE = "On-chain deposit via BSC. Tx: {tx_hash}"

# ========================================================================
# HTTP CONSTANTS
# ========================================================================

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type"
    ),
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}
