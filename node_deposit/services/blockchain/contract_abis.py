"""
Rocket Pool contract ABIs.

Only the functions the deposit pipeline calls are included.
"""


def _view(name: str, inputs: list[tuple[str, str]], output: str) -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": output}],
    }


ROCKET_STORAGE_ABI = [
    _view("getAddress", [("_key", "bytes32")], "address"),
]

ROCKET_NODE_MANAGER_ABI = [
    _view("getNodeExists", [("_nodeAddress", "address")], "bool"),
]

ROCKET_NODE_STAKING_ABI = [
    _view("getNodeMinipoolLimit", [("_nodeAddress", "address")], "uint256"),
]

ROCKET_MINIPOOL_MANAGER_ABI = [
    _view("getNodeMinipoolCount", [("_nodeAddress", "address")], "uint256"),
    _view("getMinipoolWithdrawalCredentials", [("_minipoolAddress", "address")], "bytes"),
]

ROCKET_MINIPOOL_FACTORY_ABI = [
    _view("getMinipoolBytecode", [], "bytes"),
]

ROCKET_DAO_NODE_TRUSTED_ABI = [
    _view("getMemberIsValid", [("_nodeAddress", "address")], "bool"),
    _view("getMemberUnbondedValidatorCount", [("_nodeAddress", "address")], "uint256"),
]

ROCKET_DAO_PROTOCOL_SETTINGS_NODE_ABI = [
    _view("getDepositEnabled", [], "bool"),
]

ROCKET_DAO_TRUSTED_SETTINGS_MEMBERS_ABI = [
    _view("getMinipoolUnbondedMax", [], "uint256"),
]

ROCKET_DAO_TRUSTED_SETTINGS_MINIPOOL_ABI = [
    _view("getScrubPeriod", [], "uint256"),
]

ROCKET_NETWORK_PRICES_ABI = [
    _view("inConsensus", [], "bool"),
]

ROCKET_NODE_DEPOSIT_ABI = [
    _view("getDepositType", [("_amount", "uint256")], "uint8"),
    {
        "name": "deposit",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "_minimumNodeFee", "type": "uint256"},
            {"name": "_validatorPubkey", "type": "bytes"},
            {"name": "_validatorSignature", "type": "bytes"},
            {"name": "_depositDataRoot", "type": "bytes32"},
            {"name": "_salt", "type": "uint256"},
            {"name": "_expectedMinipoolAddress", "type": "address"},
        ],
        "outputs": [],
    },
]
