"""
Convenient explanations for b2x, b2lx, lx, and x functions, plus the
conversions between python-bitcoinlib outpoints and the hex identifiers used
as index keys.
"""

from bitcoin.core import (
    # convert bytes to hex (see x)
    b2x,

    # convert hex to bytes (see b2x)
    x,

    # convert little-endian hex string to bytes (see b2lx)
    lx,

    # convert bytes to little-endian hex string (see lx)
    b2lx,
)

def txid_to_hex(txid):
    """
    Normalize a txid to the display (big-endian) hex string. Accepts either
    the internal byte order used inside transactions, or an existing hex
    string.
    """
    if isinstance(txid, (bytes, bytearray)):
        return b2lx(bytes(txid))
    return txid

def outpoint_to_key(prevout):
    """
    Convert a COutPoint into a (txid hex, vout) tuple.
    """
    return (b2lx(prevout.hash), prevout.n)

def format_outpoint(txid, vout):
    return "{}:{}".format(txid_to_hex(txid), vout)
