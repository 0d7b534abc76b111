class CapabilityUnavailable(RuntimeError):
    """The platform cannot record or synthesize speech (missing library or device)."""
