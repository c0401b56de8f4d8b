"""Fund administration ledger: entity lifecycle and accounting invariants."""
