class TimelineError(Exception):
    """Base exception for Regwatch errors."""
    pass

class ConfigError(TimelineError):
    """Configuration loading specific errors."""
    pass

class FetchFailure(TimelineError):
    """Transport or HTTP errors while retrieving a feed."""
    pass

class DecodeFailure(TimelineError):
    """Feed payload is missing the gviz envelope or is not a readable table."""
    pass

class NormalizationFailure(TimelineError):
    """Decoded table is absent at the normalizer boundary."""
    pass
