"""Error kinds raised by the inference core."""


class LannError(Exception):
    """Base class for all pbte_lann errors."""


class DimensionMismatchError(LannError, ValueError):
    """Input or parameter shape is inconsistent with the declared network shape."""


class OutOfBoundsError(LannError, IndexError):
    """Matrix index outside the declared extents."""


class UnknownActivationError(LannError, ValueError):
    """Activation name not recognised when building a network."""


class NonFiniteInputError(LannError, ValueError):
    """Composition or temperature is NaN or infinite."""


class ParameterFormatError(LannError, ValueError):
    """Parameter bundle is missing keys or is otherwise malformed."""
