class RegistrationError(Exception):
    """
    Base class for every error surfaced by the registration components.
    Callers must not assume any transformation (identity or otherwise) was produced when one is raised.
    """
    message: str

    def __init__(self, message: str, *args):
        super().__init__(message, *args)
        self.message = message


class ConfigurationError(RegistrationError):
    """Configuration could not be read or did not describe valid parameters."""

    def __init__(self, message: str, *args):
        super().__init__(message, *args)


class InvalidParameterError(RegistrationError):
    """e.g. sigma set to zero, a negative value, or a non-finite value"""

    def __init__(self, message: str, *args):
        super().__init__(message, *args)


class SizeMismatchError(RegistrationError):
    """Cloud, index list, or correspondence list sizes are inconsistent for the requested estimation."""

    def __init__(self, message: str, *args):
        super().__init__(message, *args)


class DegenerateInputError(RegistrationError):
    """
    No valid (finite, positively weighted) point contributes,
    or the point configuration does not determine a unique rotation.
    """

    def __init__(self, message: str, *args):
        super().__init__(message, *args)


class NumericFailureError(RegistrationError):
    """Singular value decomposition did not converge, or the correlation matrix is not finite."""

    def __init__(self, message: str, *args):
        super().__init__(message, *args)
