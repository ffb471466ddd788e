"""State/sink layer.

This package owns everything that outlives a single poll cycle: the
persisted access token, the device-group/named-value tree and the health
status, together with the reconciler that is the only component allowed
to write mapped device records into the tree.
"""
