"""
Exceptions raised by the perceptron engine.

A prediction that differs from the gold output is the learning signal, not
an error, so nothing here is raised from inside the training loop itself.
"""


class PerceptronError(RuntimeError):
    """Base class for engine errors."""


class ModelNotInitializedError(PerceptronError):
    """
    Raised when a model is trained or scored before init().

    Signals a caller bug; it is never retried.
    """


class PersistenceError(PerceptronError):
    """
    Raised when a weight vector cannot be written or read back.

    A failed read leaves the model's live weights untouched.
    """
