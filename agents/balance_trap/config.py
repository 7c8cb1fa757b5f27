from shared.config import settings

AGENT_NAME = "balance_trap"

# Variants
VARIANT_RESILIENT = "resilient"   # zero-substituting collector, relative rule, open collect()
VARIANT_STRICT = "strict"         # whitelisted collect(), failures propagate, absolute rule only
VARIANTS = (VARIANT_RESILIENT, VARIANT_STRICT)

# 1 bps = 0.01%
BPS_DENOMINATOR = 10_000

# Largest value an ABI uint256 can carry
UINT256_MAX = 2**256 - 1

# Dry-run polling
POLL_INTERVAL = settings.POLL_INTERVAL
HISTORY_SIZE = max(settings.HISTORY_SIZE, 2)  # the decider needs a pair

# Fixed rejection messages
ERR_NOT_WHITELISTED = "Not whitelisted"
ERR_ONLY_DEPLOYER_ADD = "Only deployer can add"
ERR_ONLY_DEPLOYER_REMOVE = "Only deployer can remove"
ERR_UNAUTHORIZED = "unauthorized"
