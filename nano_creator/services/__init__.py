"""
Services layer

Organization:
    - infrastructure/: transport, retries, batching, parsing, storage
    - generation/: typed remote operations
    - pipeline/: the content stages
    - session/: the controller that owns pipeline state
"""
