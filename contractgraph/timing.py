"""
Timelock analysis of a contract graph.

Every transaction has some absolute lock (nLockTime) and relative locks (bip68
nSequence) that bound the earliest moment it can be mined. Starting from the
base transactions of the contract and walking down the spend links, the
engine figures out which transactions can never be valid before a given
horizon (a maximum time and a maximum block height).

entrypoint: unreachable_by_time
"""

import random
from collections import namedtuple

from contractgraph.loggingconfig import logger
from contractgraph.config import (
    LOCKTIME_THRESHOLD,
    SEQUENCE_FINAL,
    SEQUENCE_LOCKTIME_DISABLE_FLAG,
    SEQUENCE_LOCKTIME_TYPE_FLAG,
    SEQUENCE_LOCKTIME_MASK,
    SEQUENCE_LOCKTIME_GRANULARITY,
)

TimingData = namedtuple("TimingData", [
    "unlock_time",
    "unlock_height",
    "unlock_at_relative_height",
    "unlock_at_relative_time",
    "node",
])

class TimingCacheEntry(object):
    """
    Cached facts about one transaction: its own timelocks, and (once
    requested) the sorted list of the transaction and all of its descendants.
    """

    def __init__(self, timing, descendants=None):
        self.timing = timing
        self.descendants = descendants

class TimingCache(object):
    """
    Maps txid to TimingCacheEntry. Entries are filled lazily and never
    evicted; one cache belongs to exactly one loaded contract.
    """

    def __init__(self):
        self.entries = {}

    def get(self, txid):
        return self.entries.get(txid)

    def set(self, txid, entry):
        self.entries[txid] = entry

    def __contains__(self, txid):
        return txid in self.entries

    def __len__(self):
        return len(self.entries)

def txid_key(node):
    return node.txid

def compute_timing(node, cache):
    """
    Extract the timelocks of a transaction.

    Each input with a non-final nSequence enables nLockTime. Unless its
    disable flag is set, the low 16 bits of the nSequence are a relative lock,
    in units of 512 seconds when the type flag is set and in blocks otherwise.
    Every input has to clear its own relative lock, so the largest relative
    time and the largest relative height apply to the whole transaction.
    """
    entry = cache.get(node.txid)
    if entry is not None:
        return entry.timing

    unlock_at_relative_height = 0
    unlock_at_relative_time = 0
    locktime_enabled = False

    for sequence in node.sequences:
        if sequence == SEQUENCE_FINAL:
            continue

        locktime_enabled = True

        if sequence & SEQUENCE_LOCKTIME_DISABLE_FLAG:
            continue

        value = sequence & SEQUENCE_LOCKTIME_MASK
        if sequence & SEQUENCE_LOCKTIME_TYPE_FLAG:
            unlock_at_relative_time = max(value * SEQUENCE_LOCKTIME_GRANULARITY, unlock_at_relative_time)
        else:
            unlock_at_relative_height = max(value, unlock_at_relative_height)

    # Median time past is approximated by the raw nLockTime.
    locktime = node.locktime
    is_height = locktime < LOCKTIME_THRESHOLD
    unlock_time = locktime if locktime_enabled and not is_height else 0
    unlock_height = locktime if locktime_enabled and is_height else 0

    timing = TimingData(
        unlock_time=unlock_time,
        unlock_height=unlock_height,
        unlock_at_relative_height=unlock_at_relative_height,
        unlock_at_relative_time=unlock_at_relative_time,
        node=node,
    )
    cache.set(node.txid, TimingCacheEntry(timing))
    return timing

def get_children(node, spend_index):
    """
    Every transaction spending some output of node, without duplicates, in
    output index order.
    """
    grouped = spend_index.get_grouped(node.txid) or {}
    children = []
    for vout in sorted(grouped.keys()):
        for spender in grouped[vout]:
            if spender not in children:
                children.append(spender)
    return children

def get_cache_entry(node, cache):
    entry = cache.get(node.txid)
    if entry is None:
        compute_timing(node, cache)
        entry = cache.get(node.txid)
    return entry

def all_descendants(node, spend_index, cache):
    """
    Get node and every transaction transitively spending from it, sorted by
    txid. The list is computed once per node and cached; callers must not
    modify it.

    Contracts can be arbitrarily deep, so the closure is filled in post-order
    from an explicit stack: a node's list is built once every child's list is
    in the cache.
    """
    entry = cache.get(node.txid)
    if entry is not None and entry.descendants is not None:
        return entry.descendants

    stack = [(node, False)]
    while stack:
        (current, children_done) = stack.pop()
        entry = get_cache_entry(current, cache)
        if entry.descendants is not None:
            continue

        children = get_children(current, spend_index)

        if not children_done:
            stack.append((current, True))
            for child in children:
                child_entry = cache.get(child.txid)
                if child_entry is None or child_entry.descendants is None:
                    stack.append((child, False))
            continue

        descendants = {current.txid: current}
        for child in children:
            for descendant in cache.get(child.txid).descendants:
                descendants[descendant.txid] = descendant

        entry.descendants = sorted(descendants.values(), key=txid_key)

    return cache.get(node.txid).descendants

def get_base_transactions(nodes, txid_index):
    """
    Find the transactions none of whose inputs are created by another
    transaction in the graph. Usually these are exactly the placeholders, but
    the list is computed from the structure rather than assumed.
    """
    return [
        node for node in nodes
        if not any(txid_index.has(txid) for txid in node.parent_txids)
    ]

def sorted_unique(nodes):
    unique = {}
    for node in nodes:
        unique[node.txid] = node
    return sorted(unique.values(), key=txid_key)

def merge_and_deduplicate_sorted(first, second):
    """
    Merge two lists of nodes that are each sorted by txid and duplicate-free
    into one sorted duplicate-free list.
    """
    merged = []
    i = 0
    j = 0
    while i < len(first) and j < len(second):
        left = first[i].txid
        right = second[j].txid
        if left < right:
            merged.append(first[i])
            i += 1
        elif left > right:
            merged.append(second[j])
            j += 1
        else:
            merged.append(first[i])
            i += 1
            j += 1
    merged.extend(first[i:])
    merged.extend(second[j:])
    return merged

def merge_randomly(lists, rng=random):
    """
    Merge many sorted duplicate-free lists into one.

    Lists can share long runs of descendants, so merging them in a fixed order
    can be made quadratic by an adversarial contract. Picking two random lists
    at a time avoids that. The choice only affects the running time, never the
    result.
    """
    lists = list(lists)
    while len(lists) > 1:
        v1 = rng.randrange(len(lists))
        v2 = rng.randrange(len(lists))
        while v1 == v2:
            v2 = rng.randrange(len(lists))

        lists[v1] = merge_and_deduplicate_sorted(lists[v1], lists[v2])

        # Fill the hole at v2 with the last list.
        last = lists.pop()
        if len(lists) != v2:
            lists[v2] = last

    if len(lists) == 0:
        return []
    return lists[0]

def unreachable_inner(node, max_time, max_height, elapsed_time, elapsed_height, spend_index, cache):
    """
    Walk the spenders of node, assuming node was mined at
    (elapsed_time, elapsed_height), and collect every transaction that can't
    be mined by (max_time, max_height).

    A spender that misses the horizon takes all of its descendants with it.
    A spender that makes it becomes the new starting point for its own
    spenders. The returned list may contain duplicates and is not sorted.

    A transaction reached again at the same (time, height) by another path
    gives the same answer, so each such state is only explored once. Without
    that, stacked diamonds (a split whose branches join again) would be
    explored once per path.
    """
    unreachable = []
    pruned = set()
    explored = set()
    work = [(node, elapsed_time, elapsed_height)]

    while work:
        (current, elapsed_time, elapsed_height) = work.pop()

        for child in get_children(current, spend_index):
            timing = compute_timing(child, cache)

            # The soonest moment both kinds of locks are satisfied.
            time_when_spendable = max(timing.unlock_time, elapsed_time + timing.unlock_at_relative_time)
            height_when_spendable = max(timing.unlock_height, elapsed_height + timing.unlock_at_relative_height)

            # Strictly greater: a block at exactly the horizon is still accepted.
            if time_when_spendable > max_time or height_when_spendable > max_height:
                if child.txid not in pruned:
                    pruned.add(child.txid)
                    unreachable.extend(all_descendants(child, spend_index, cache))
                continue

            state = (child.txid, time_when_spendable, height_when_spendable)
            if state not in explored:
                explored.add(state)
                work.append((child, time_when_spendable, height_when_spendable))

    return unreachable

def unreachable_by_time(bases, max_time, max_height, start_time, start_height, spend_index, cache, rng=random):
    """
    Get every transaction reachable from the base transactions that can't be
    valid by (max_time, max_height), when the bases are mined at
    (start_time, start_height).

    returns a list of transaction nodes sorted by txid
    """
    per_base = [
        sorted_unique(unreachable_inner(base, max_time, max_height, start_time, start_height, spend_index, cache))
        for base in bases
    ]
    unreachable = merge_randomly(per_base, rng=rng)

    logger.debug("{} of the transactions below {} bases are unreachable by time {} height {}".format(
        len(unreachable), len(bases), max_time, max_height))

    return unreachable
