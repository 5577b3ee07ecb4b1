"""
Infrastructure layer: remote transport, retries, batching, parsing, storage.
"""
