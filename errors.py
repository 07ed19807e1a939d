# errors.py


class InvoiceRenderError(Exception):
    """Base class for everything the invoice renderer raises."""


class RenderFailure(InvoiceRenderError):
    """
    Fatal: drawing the invoice failed and no document was produced.
    Callers translate this into a 500-class response.
    """

    def __init__(self, message: str, invoice_number: str | None = None):
        super().__init__(message)
        self.invoice_number = invoice_number


class InputNormalizationWarning(UserWarning):
    """
    Recoverable: part of the input could not be normalized (e.g. malformed
    items JSON). Raised and caught inside normalization, logged, never surfaced.
    """
