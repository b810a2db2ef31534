"""
Application constants.

Centralized protocol and RPC constants for the deposit pipeline.
"""

# ========================================================================
# BEACON CHAIN CONSTANTS
# ========================================================================

# Signature domain type for validator deposits
DOMAIN_DEPOSIT = bytes.fromhex("03000000")

# Deposits are valid across forks, so the deposit domain is always computed
# against an all-zero genesis validators root
ZERO_ROOT = b"\x00" * 32

# Amount staked by the initial validator deposit (16 ETH, in gwei).
# This is NOT the amount the node operator sends with the transaction.
VALIDATOR_DEPOSIT_AMOUNT_GWEI = 16_000_000_000

BLS_PUBKEY_LENGTH = 48
BLS_SIGNATURE_LENGTH = 96
WITHDRAWAL_CREDENTIALS_LENGTH = 32
FORK_VERSION_LENGTH = 4

# ========================================================================
# RPC CONSTANTS
# ========================================================================

# Timeouts (in seconds)
BLOCKCHAIN_TIMEOUT = 30.0  # Execution client calls
BEACON_TIMEOUT = 30.0  # Beacon API requests

# Multiplier applied to the raw gas estimate
GAS_LIMIT_BUFFER = 1.2

# Fee caps
MAX_FEE_GWEI = 150
MAX_PRIORITY_FEE_GWEI = 2

# ========================================================================
# ROCKET POOL CONTRACT NAMES (resolved through RocketStorage)
# ========================================================================

CONTRACT_NODE_DEPOSIT = "rocketNodeDeposit"
CONTRACT_NODE_MANAGER = "rocketNodeManager"
CONTRACT_NODE_STAKING = "rocketNodeStaking"
CONTRACT_MINIPOOL_MANAGER = "rocketMinipoolManager"
CONTRACT_MINIPOOL_FACTORY = "rocketMinipoolFactory"
CONTRACT_DAO_NODE_TRUSTED = "rocketDAONodeTrusted"
CONTRACT_DAO_PROTOCOL_SETTINGS_NODE = "rocketDAOProtocolSettingsNode"
CONTRACT_DAO_TRUSTED_SETTINGS_MEMBERS = "rocketDAONodeTrustedSettingsMembers"
CONTRACT_DAO_TRUSTED_SETTINGS_MINIPOOL = "rocketDAONodeTrustedSettingsMinipool"
CONTRACT_NETWORK_PRICES = "rocketNetworkPrices"
CONTRACT_CASPER_DEPOSIT = "casperDeposit"
