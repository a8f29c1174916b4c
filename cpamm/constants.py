"""Protocol constants for the constant-product pool program.

Centralizes integer widths, curve parameters, and derivation seed tags.
"""

U8_MAX = 2**8 - 1
U16_MAX = 2**16 - 1
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

# Fees are expressed in basis points of the raw swap output
FEE_DENOMINATOR = 10_000

# Fixed-point scale for share ratios in deposit/withdraw math
CURVE_PRECISION = 1_000_000_000

# Decimals of the liquidity share mint created by Initialize
LIQUIDITY_DECIMALS = 6

# Seed tag prefixed to the little-endian pool seed when deriving the pool address
POOL_SEED_TAG = b"pool"

# Length of every account identifier
PUBKEY_LENGTH = 32

# Default program and token-service identities (base58)
DEFAULT_PROGRAM_ID = "2oXupQcZBcNtq5H1SjzdAZ2eKv1AxiE6XbLk4Ancw2bB"
DEFAULT_TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
