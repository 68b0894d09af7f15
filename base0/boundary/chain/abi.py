"""
FilecoinCIDStore ABI fragments used by the web3 registry.

Dependencies: None
System role: Contract interface definition
"""

_UINT = "uint256"


def _fn(name: str, inputs: list[tuple[str, str]], outputs: list[str], mutability: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
    }


CID_STORE_ABI: list[dict] = [
    _fn(
        "storeContent",
        [
            ("pieceCid", "bytes"),
            ("dataCid", "string"),
            ("price", _UINT),
            ("title", "string"),
            ("description", "string"),
            ("pieceSize", _UINT),
        ],
        [_UINT],
        "nonpayable",
    ),
    _fn("purchaseAccess", [("contentId", _UINT)], [], "payable"),
    _fn("getCID", [("contentId", _UINT)], ["string"], "view"),
    _fn(
        "getContentInfo",
        [("contentId", _UINT)],
        ["string", "string", _UINT, "address", "bool", _UINT, "uint64", _UINT, "bool"],
        "view",
    ),
    _fn("getAllActiveContent", [], [f"{_UINT}[]"], "view"),
    _fn("getUserOwnedContent", [("user", "address")], [f"{_UINT}[]"], "view"),
    _fn("getUserPurchasedContent", [("user", "address")], [f"{_UINT}[]"], "view"),
    _fn("hasAccess", [("contentId", _UINT), ("user", "address")], ["bool"], "view"),
    _fn("checkDealActivation", [("contentId", _UINT)], ["bool"], "view"),
    _fn("platform_fee_percentage", [], [_UINT], "view"),
    _fn(
        "updateDeal",
        [("contentId", _UINT), ("dealId", "uint64"), ("active", "bool")],
        [],
        "nonpayable",
    ),
    _fn("setContentActive", [("contentId", _UINT), ("active", "bool")], [], "nonpayable"),
    {
        "type": "event",
        "name": "ContentStored",
        "anonymous": False,
        "inputs": [
            {"name": "contentId", "type": _UINT, "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "pieceCid", "type": "bytes", "indexed": False},
            {"name": "price", "type": _UINT, "indexed": False},
        ],
    },
]
