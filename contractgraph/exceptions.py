"""
High-level exceptions specific to the project.
"""

class ContractGraphException(Exception):
    """
    Represents a general exception or error from the contractgraph library.
    """
    pass

class MalformedTransactionError(ContractGraphException):
    """
    A transaction, signing artifact or record could not be parsed. The current
    load is aborted.
    """
    pass

class ContractInvariantError(ContractGraphException):
    """
    The contract data violates a structural invariant. This signals corrupted
    upstream data and is never retried.
    """
    pass

class GroupingInvariantError(ContractInvariantError):
    """
    A group of alternative signings is empty, or the signings in one program
    path do not spend the same coin.
    """
    pass

class MissingSpenderError(ContractInvariantError):
    """
    A spender listed in the outpoint index has no input spending the outpoint.
    """
    pass
