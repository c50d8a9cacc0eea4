"""
Constants shared across the contract graph engine and its command line tools.
"""

from bitcoin.core import COIN

# Default name of the contract data file when no path is given.
CONTRACT_FILENAME = "contract.json"

LOG_FILENAME = "contractgraph-log.txt"

# Placeholder transactions stand in for coins funded from outside of the
# contract. Their outputs carry the entire fixed supply so that any real
# spender is always "fully funded" when inspected.
PLACEHOLDER_OUTPUT_VALUE = 21000000 * COIN
PLACEHOLDER_LABEL = "Unknown Inputs"

DEFAULT_TRANSACTION_LABEL = "unlabeled"

# nLockTime values below this threshold are block heights, the rest are UNIX
# timestamps.
LOCKTIME_THRESHOLD = 500000000

# bip68 relative lock-time fields of nSequence
SEQUENCE_FINAL = 0xffffffff
SEQUENCE_LOCKTIME_DISABLE_FLAG = 1 << 31
SEQUENCE_LOCKTIME_TYPE_FLAG = 1 << 22
SEQUENCE_LOCKTIME_MASK = 0x0000ffff
SEQUENCE_LOCKTIME_GRANULARITY = 512

PSBT_MAGIC = b"psbt\xff"

# minimum number of confirmations before a transaction counts as confirmed
CONFIRMATION_THRESHOLD = 1

# Upper bound on the outputs of any transaction that fits in a block: the
# block weight limit over the weight of the smallest possible output (8 byte
# amount and an empty script). Inputs referencing a higher index can't be
# valid.
MAX_BLOCK_WEIGHT = 4000000
MAX_OUTPUTS_PER_TRANSACTION = MAX_BLOCK_WEIGHT // (9 * 4)
