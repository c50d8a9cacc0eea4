from bitcoin.core.script import CScript

SEGWIT_V0 = 0x00
WITNESS_SCRIPT_HASH_LENGTH = 32

def make_segwit_v0_script(program):
    """
    Make a version 0 witness output script (OP_0 <32 bytes>) from a witness
    program. The program is cut or zero-padded to 32 bytes.

    returns CScript
    """
    program = bytes(program[:WITNESS_SCRIPT_HASH_LENGTH]).ljust(WITNESS_SCRIPT_HASH_LENGTH, b"\x00")
    return CScript(bytes([SEGWIT_V0, WITNESS_SCRIPT_HASH_LENGTH]) + program)

def total_output_value(bitcoin_transaction):
    """
    Sum of the values of every output of a transaction.
    """
    return sum(txout.nValue for txout in bitcoin_transaction.vout)
