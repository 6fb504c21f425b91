_PROPOSAL_CALL_INPUTS = [
    {"internalType": "address[]", "name": "targets", "type": "address[]"},
    {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
    {"internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
    {"internalType": "bytes32", "name": "descriptionHash", "type": "bytes32"}
]

# --- GOVERNOR (OpenZeppelin Governor + GovernorTimelockControl) ---
GOVERNOR_ABI = [
    {
        "inputs": [
            {"internalType": "address[]", "name": "targets", "type": "address[]"},
            {"internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
            {"internalType": "string", "name": "description", "type": "string"}
        ],
        "name": "propose",
        "outputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "proposalId", "type": "uint256"},
            {"internalType": "uint8", "name": "support", "type": "uint8"}
        ],
        "name": "castVote",
        "outputs": [{"internalType": "uint256", "name": "balance", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "proposalId", "type": "uint256"},
            {"internalType": "uint8", "name": "support", "type": "uint8"},
            {"internalType": "string", "name": "reason", "type": "string"}
        ],
        "name": "castVoteWithReason",
        "outputs": [{"internalType": "uint256", "name": "balance", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposalId", "type": "uint256"}],
        "name": "state",
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": _PROPOSAL_CALL_INPUTS,
        "name": "queue",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": _PROPOSAL_CALL_INPUTS,
        "name": "execute",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": _PROPOSAL_CALL_INPUTS,
        "name": "cancel",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]

# --- GOVERNOR SETTINGS (self-administered, called by the timelock) ---
GOVERNOR_SETTINGS_ABI = [
    {
        "inputs": [{"internalType": "uint256", "name": "newQuorumNumerator", "type": "uint256"}],
        "name": "updateQuorumNumerator",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint48", "name": "newVotingDelay", "type": "uint48"}],
        "name": "setVotingDelay",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint32", "name": "newVotingPeriod", "type": "uint32"}],
        "name": "setVotingPeriod",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "newProposalThreshold", "type": "uint256"}],
        "name": "setProposalThreshold",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]

# --- MANAGER (DAO manager role on the governor) ---
MANAGER_ABI = [
    {
        "inputs": [{"internalType": "address", "name": "newManager", "type": "address"}],
        "name": "setManager",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "previousManager", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "newManager", "type": "address"}
        ],
        "name": "ManagerChanged",
        "type": "event"
    }
]
