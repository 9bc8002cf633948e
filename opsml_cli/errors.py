"""Root exception shared by every opsml-cli module."""


class OpsmlCLIError(Exception):
    """
    Base exception for all opsml-cli errors.

    The command-line front end catches this type and renders the message,
    so every module-level error hierarchy derives from it.
    """

    pass
