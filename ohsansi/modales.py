"""
Coordinador de modales: un solo diálogo visible a la vez y un Future[bool]
por cada apertura (True = confirmar, False = cancelar / cerrar).

El coordinador no depende de Streamlit; `ohsansi.ui` lo dibuja con st.dialog
y le reenvía los clics, el Escape y el cierre nativo del diálogo.
"""

import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

CONFIRMACION = "confirmacion"
ELIMINACION = "eliminacion"
EXITO = "exito"
ERROR = "error"
ADVERTENCIA = "advertencia"
PROCESO = "proceso"

KINDS = (CONFIRMACION, ELIMINACION, EXITO, ERROR, ADVERTENCIA, PROCESO)

DEFAULT_TITLES = {
    EXITO: "Operación exitosa",
    ERROR: "Ocurrió un error",
    ADVERTENCIA: "Advertencia",
    CONFIRMACION: "Confirmar acción",
    ELIMINACION: "Confirmar eliminación",
    PROCESO: "Procesando",
}

DEFAULT_MESSAGES = {
    EXITO: "La acción se completó correctamente.",
    ERROR: "Revise e intente nuevamente.",
    ADVERTENCIA: "Revise antes de continuar.",
    CONFIRMACION: "¿Desea continuar?",
    ELIMINACION: "¿Está seguro de eliminar? Esta acción no se puede deshacer.",
    PROCESO: "Espere un momento…",
}

DEFAULT_CONFIRM_LABELS = {
    EXITO: "Aceptar",
    ERROR: "Entendido",
    ADVERTENCIA: "Entendido",
    CONFIRMACION: "Confirmar",
    ELIMINACION: "Eliminar",
    PROCESO: "Procesando...",
}

ICONS = {
    EXITO: "✅",
    ERROR: "❌",
    ADVERTENCIA: "⚠️",
    CONFIRMACION: "❔",
    ELIMINACION: "🗑️",
    PROCESO: "⏳",
}

SUCCESS_AUTO_CLOSE_MS = 1800


@dataclass(frozen=True)
class ModalOptions:
    kind: str = CONFIRMACION
    title: str = None
    message: str = None
    confirm_label: str = None
    cancel_label: str = None
    show_cancel: bool = None
    block_close: bool = None
    auto_close_ms: int = None
    on_confirm: object = None
    on_cancel: object = None

    def resolved(self):
        """Completa los campos vacíos con los valores por defecto del tipo."""
        if self.kind not in KINDS:
            raise ValueError(f"Tipo de modal desconocido: {self.kind}")
        kind = self.kind
        return replace(
            self,
            title=self.title or DEFAULT_TITLES[kind],
            message=self.message or DEFAULT_MESSAGES[kind],
            confirm_label=self.confirm_label or DEFAULT_CONFIRM_LABELS[kind],
            cancel_label=self.cancel_label or "Cancelar",
            show_cancel=(
                self.show_cancel if self.show_cancel is not None
                else kind not in (EXITO, PROCESO)
            ),
            block_close=(
                self.block_close if self.block_close is not None
                else kind == PROCESO
            ),
        )


@dataclass
class ModalRequest:
    options: ModalOptions
    future: Future
    previous_focus: object = None
    deadline: float = None

    @property
    def kind(self):
        return self.options.kind

    @property
    def icon(self):
        return ICONS[self.options.kind]

    def remaining(self, now):
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - now)


class ModalCoordinator:
    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self.active = None
        self.focused = None
        self._restore = None

    @property
    def visible(self):
        return self.active is not None

    def focus(self, key):
        self.focused = key

    def pop_restore(self):
        """Clave a la que devolver el foco tras el último cierre (una sola vez)."""
        key, self._restore = self._restore, None
        return key

    def open(self, options=None, focus=None, **kwargs):
        if options is None:
            options = ModalOptions(**kwargs)
        elif kwargs:
            options = replace(options, **kwargs)
        options = options.resolved()

        while self.active is not None:
            # El pedido anterior se resuelve como cancelado antes de reemplazarlo
            logger.info("Modal '%s' reemplazado por '%s'", self.active.kind, options.kind)
            previous = self.active
            self.active = None
            self.focused = previous.previous_focus
            self._resolve(previous, False)

        if focus is not None:
            self.focused = focus
        self._restore = None

        future = Future()
        future.set_running_or_notify_cancel()
        deadline = None
        if options.auto_close_ms:
            deadline = self.clock() + options.auto_close_ms / 1000.0
        self.active = ModalRequest(
            options=options,
            future=future,
            previous_focus=self.focused,
            deadline=deadline,
        )
        return future

    def close(self, confirmed):
        request = self.active
        if request is None:
            return
        self.active = None
        self.focused = request.previous_focus
        self._resolve(request, bool(confirmed))
        # Si el callback abrió otro modal, el foco se devuelve cuando ese cierre
        if self.active is None:
            self._restore = self.focused

    def _resolve(self, request, confirmed):
        request.future.set_result(confirmed)
        callback = request.options.on_confirm if confirmed else request.options.on_cancel
        if callback is not None:
            callback()

    def press_key(self, key):
        if self.active is None or key != "Escape":
            return
        if not self.active.options.block_close:
            self.close(False)

    def click_backdrop(self):
        if self.active is not None and not self.active.options.block_close:
            self.close(False)

    def dismiss(self):
        self.press_key("Escape")

    def tick(self, now=None):
        request = self.active
        if request is None or request.deadline is None:
            return False
        if now is None:
            now = self.clock()
        if now >= request.deadline:
            self.close(True)
            return True
        return False

    # --------------------------------------------------------
    # Atajos por tipo
    # --------------------------------------------------------

    def _open_kind(self, kind, defaults, options, kwargs):
        focus = kwargs.pop("focus", None)
        if options is None:
            options = ModalOptions(kind=kind, **kwargs)
        else:
            options = replace(options, kind=kind, **kwargs)
        for key, value in defaults.items():
            if getattr(options, key) is None:
                options = replace(options, **{key: value})
        return self.open(options, focus=focus)

    def confirm(self, options=None, **kwargs):
        return self._open_kind(CONFIRMACION, {}, options, kwargs)

    def delete(self, options=None, **kwargs):
        return self._open_kind(ELIMINACION, {}, options, kwargs)

    def success(self, options=None, **kwargs):
        return self._open_kind(
            EXITO, {"auto_close_ms": SUCCESS_AUTO_CLOSE_MS}, options, kwargs
        )

    def error(self, options=None, **kwargs):
        return self._open_kind(ERROR, {}, options, kwargs)

    def warn(self, options=None, **kwargs):
        return self._open_kind(ADVERTENCIA, {}, options, kwargs)

    def progress(self, options=None, **kwargs):
        return self._open_kind(PROCESO, {}, options, kwargs)
