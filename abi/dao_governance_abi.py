# --- GOVERNOR (DAO Governance - OpenZeppelin Governor + GovernorVotes) ---
PROPOSAL_CREATED_EVENT = "ProposalCreated"

GOVERNOR_ABI = [
    # GovernorVotes: address of the voting (membership) token
    {
        "inputs": [],
        "name": "token",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    # None of the ProposalCreated fields are indexed
    {
        "anonymous": False,
        "inputs": [
            {"indexed": False, "internalType": "uint256", "name": "proposalId", "type": "uint256"},
            {"indexed": False, "internalType": "address", "name": "proposer", "type": "address"},
            {"indexed": False, "internalType": "address[]", "name": "targets", "type": "address[]"},
            {"indexed": False, "internalType": "uint256[]", "name": "values", "type": "uint256[]"},
            {"indexed": False, "internalType": "string[]", "name": "signatures", "type": "string[]"},
            {"indexed": False, "internalType": "bytes[]", "name": "calldatas", "type": "bytes[]"},
            {"indexed": False, "internalType": "uint256", "name": "startBlock", "type": "uint256"},
            {"indexed": False, "internalType": "uint256", "name": "endBlock", "type": "uint256"},
            {"indexed": False, "internalType": "string", "name": "description", "type": "string"}
        ],
        "name": PROPOSAL_CREATED_EVENT,
        "type": "event"
    }
]
