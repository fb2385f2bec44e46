# ============================================================
# ERRORES DEL PANEL
# ============================================================


class OhSansiError(Exception):
    """Error base del panel; el mensaje siempre se muestra al usuario."""


class ApiError(OhSansiError):
    def __init__(self, message, status=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class ImportacionError(OhSansiError):
    def __init__(self, message, missing=()):
        super().__init__(message)
        self.message = message
        self.missing = list(missing)


class ValidationError(OhSansiError):
    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__(
            "; ".join(f"{campo}: {msg}" for campo, msg in self.errors.items())
        )


class FaseError(OhSansiError):
    """Transición de fase no permitida en el estado actual."""
