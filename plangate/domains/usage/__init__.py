"""Usage domain: counter store, limit enforcement gate and durable ledger.

The counter store holds live per-month counters in the cache; the ledger
persists daily snapshots of them. The gate combines the counter store with
the plan resolver to admit or reject requests.
"""
