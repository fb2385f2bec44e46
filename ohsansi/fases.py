"""
Estado de la olimpiada y sus fases de competición.

El estado avanza No Iniciada -> Fase de Clasificación -> Fase Final ->
Concluida. Dentro de cada fase se abre, se cierra y se publican resultados,
y cada paso queda en el historial con fecha y administrador.
"""

import json
import logging
from datetime import datetime

from ohsansi.errores import FaseError

logger = logging.getLogger(__name__)

NO_INICIADA = 1
CLASIFICACION = 2
FINAL = 3
CONCLUIDA = 4

ESTADOS = {
    NO_INICIADA: "No Iniciada",
    CLASIFICACION: "Fase de Clasificación",
    FINAL: "Fase Final",
    CONCLUIDA: "Concluida",
}

# Nombre corto de la fase que aparece en el historial
FASE_NOMBRE = {CLASIFICACION: "Clasificación", FINAL: "Final"}

INICIADA = "Iniciada"
ABIERTA = "Abierta"
CERRADA = "Cerrada"
PUBLICADA = "Publicada"

HISTORIAL_COLUMNS = {
    "numero": "N°",
    "accion": "Acción",
    "fechaHora": "Fecha y hora",
    "administrador": "Administrador",
    "fase": "Fase",
    "estado": "Estado",
}

HISTORIAL_PAGE_SIZE = 5

K_FASES = "ohsansi/fases"


def _inicial():
    return {
        "estado": NO_INICIADA,
        "abierta": False,
        "cerrada": False,
        "publicada": False,
        "historial": [],
    }


def format_fecha(dt):
    return dt.strftime("%d/%m/%Y - %H:%M hrs")


class FasesStore:
    def __init__(self, storage, clock=datetime.now, key=K_FASES):
        self.storage = storage
        self.clock = clock
        self.key = key

    def load(self):
        raw = self.storage.get_item(self.key)
        data = _inicial()
        if not raw:
            return data
        try:
            saved = json.loads(raw)
        except ValueError:
            logger.warning("Contenido inválido en la clave %s; se ignora", self.key)
            return data
        if isinstance(saved, dict) and saved.get("estado") in ESTADOS:
            data.update(saved)
        return data

    def save(self, data):
        self.storage.set_item(self.key, json.dumps(data, ensure_ascii=False))

    # --------------------------------------------------------
    # Consultas
    # --------------------------------------------------------

    def estado_id(self):
        return self.load()["estado"]

    def estado(self):
        return ESTADOS[self.estado_id()]

    def fase_actual(self):
        """Nombre corto de la fase en curso, o None fuera de una fase."""
        return FASE_NOMBRE.get(self.estado_id())

    def situacion(self):
        data = self.load()
        if data["estado"] not in FASE_NOMBRE:
            return ESTADOS[data["estado"]]
        if data["publicada"]:
            return "Resultados publicados"
        if data["abierta"]:
            return "Fase abierta"
        if data["cerrada"]:
            return "Fase cerrada"
        return "Fase sin abrir"

    def historial(self):
        """Entradas del historial, la más reciente primero."""
        return list(reversed(self.load()["historial"]))

    # --------------------------------------------------------
    # Transiciones
    # --------------------------------------------------------

    def _registrar(self, data, accion, administrador, fase):
        entrada = {
            "numero": len(data["historial"]) + 1,
            "accion": accion,
            "fechaHora": format_fecha(self.clock()),
            "administrador": administrador or "Administrador",
            "fase": fase,
            "estado": "Completado",
        }
        data["historial"].append(entrada)
        self.save(data)
        logger.info("Fase %s: %s por %s", fase, accion, entrada["administrador"])
        return entrada

    def cambiar_estado(self, estado_id, administrador=None):
        if estado_id not in ESTADOS:
            raise FaseError(f"Estado desconocido: {estado_id}")
        data = self.load()
        actual = data["estado"]
        if estado_id == actual:
            raise FaseError(f"La olimpiada ya está en «{ESTADOS[actual]}».")
        if estado_id < actual:
            raise FaseError("No se puede volver a un estado anterior de la olimpiada.")
        if data["abierta"]:
            raise FaseError("Cierre la fase en curso antes de cambiar de estado.")

        data.update(estado=estado_id, abierta=False, cerrada=False, publicada=False)
        return self._registrar(
            data, INICIADA, administrador, FASE_NOMBRE.get(estado_id, ESTADOS[estado_id])
        )

    def _fase_en_curso(self, data):
        fase = FASE_NOMBRE.get(data["estado"])
        if fase is None:
            raise FaseError(
                f"No hay una fase en curso (estado: {ESTADOS[data['estado']]})."
            )
        return fase

    def abrir_fase(self, administrador=None):
        data = self.load()
        fase = self._fase_en_curso(data)
        if data["abierta"]:
            raise FaseError(f"La fase de {fase} ya está abierta.")
        if data["publicada"]:
            raise FaseError(f"Los resultados de {fase} ya fueron publicados.")
        data.update(abierta=True, cerrada=False)
        return self._registrar(data, ABIERTA, administrador, fase)

    def cerrar_fase(self, administrador=None):
        data = self.load()
        fase = self._fase_en_curso(data)
        if not data["abierta"]:
            raise FaseError(f"La fase de {fase} no está abierta.")
        data.update(abierta=False, cerrada=True)
        return self._registrar(data, CERRADA, administrador, fase)

    def publicar_resultados(self, administrador=None):
        data = self.load()
        fase = self._fase_en_curso(data)
        if data["publicada"]:
            raise FaseError(f"Los resultados de {fase} ya fueron publicados.")
        if not data["cerrada"]:
            raise FaseError(f"Cierre la fase de {fase} antes de publicar resultados.")
        data["publicada"] = True
        return self._registrar(data, PUBLICADA, administrador, fase)
