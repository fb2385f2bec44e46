import logging
from dataclasses import dataclass

from ohsansi.errores import ApiError, ImportacionError

logger = logging.getLogger(__name__)


# ============================================================
# CACHE DE DATOS DE REFERENCIA
# ============================================================

class ReferenceCache:
    """Guarda la última lista leída hasta que alguien llama a invalidate()."""

    def __init__(self):
        self._value = None
        self._loaded = False

    @property
    def is_cached(self):
        return self._loaded

    def get(self, loader, force=False):
        if force or not self._loaded:
            self._value = loader()
            self._loaded = True
        return self._value

    def invalidate(self):
        self._value = None
        self._loaded = False


@dataclass
class Catalogo:
    codigo: str
    nombre: str
    descripcion: str = ""
    id: int = None
    estado: bool = True

    def payload(self):
        return {"codigo": self.codigo, "nombre": self.nombre, "descripcion": self.descripcion}

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data.get("id"),
            codigo=data.get("codigo", ""),
            nombre=data.get("nombre", ""),
            descripcion=data.get("descripcion", "") or "",
            estado=bool(data.get("estado", True)),
        )


# ============================================================
# ÁREAS Y NIVELES
# ============================================================

class _CatalogoApi:
    path = None

    def __init__(self, client, cache=None):
        self.client = client
        self.cache = cache or ReferenceCache()

    def _fetch(self):
        data = self.client.get(self.path) or []
        return [Catalogo.from_api(d) for d in data]

    def list(self, force_refresh=False):
        return self.cache.get(self._fetch, force=force_refresh)

    def create(self, item):
        result = self.client.post(self.path, item.payload())
        self.cache.invalidate()
        return Catalogo.from_api(result or {})

    def update(self, item_id, item):
        result = self.client.put(f"{self.path}/{item_id}", item.payload())
        self.cache.invalidate()
        return Catalogo.from_api(result or {})

    def delete(self, item_id):
        # El backend solo desactiva el registro
        result = self.client.delete(f"{self.path}/{item_id}")
        self.cache.invalidate()
        return result


class AreasApi(_CatalogoApi):
    path = "/api/areas"


class NivelesApi(_CatalogoApi):
    path = "/api/niveles"


# ============================================================
# PARAMETRIZACIÓN DE MEDALLAS
# ============================================================

MEDAL_FIELDS = ["oros", "platas", "bronces", "notaMinAprobacion"]


class MedallasApi:
    path = "/api/parametrizacion-medallas"

    def __init__(self, client):
        self.client = client

    def list(self):
        resp = self.client.get(self.path) or {}
        rows = []
        for fila in resp.get("data") or []:
            rows.append({
                "areaId": fila.get("areaId"),
                "nivelId": fila.get("nivelId"),
                "area": fila.get("areaNombre", ""),
                "nivel": fila.get("nivelNombre", ""),
                "oros": int(fila.get("oros") or 0),
                "platas": int(fila.get("platas") or 0),
                "bronces": int(fila.get("bronces") or 0),
                "notaMinAprobacion": int(fila.get("notaMinAprobacion") or 0),
            })
        return rows

    def update(self, area_id, nivel_id, oros, platas, bronces, nota_min):
        return self.client.put(
            f"{self.path}/{area_id}/{nivel_id}",
            {
                "oros": int(oros),
                "platas": int(platas),
                "bronces": int(bronces),
                "menciones": 0,
                "notaMinAprobacion": int(nota_min),
            },
        )


# ============================================================
# EVALUADORES / INSCRITOS / INSCRIPCIONES
# ============================================================

class EvaluadoresApi:
    def __init__(self, client):
        self.client = client

    def register(self, payload):
        return self.client.post("/api/evaluadores/registro", payload)


def inscrito_row(item):
    persona = item.get("olimpista") or {}
    equipo = item.get("equipo") or {}
    tutor = item.get("tutorLegal") or {}
    return {
        "id": str(item.get("idParticipacion", "")),
        "nombreCompleto": persona.get("nombreCompleto") or equipo.get("nombre") or "",
        "unidadEducativa": persona.get("unidadEducativa") or equipo.get("unidadEducativa") or "",
        "modalidad": "INDIVIDUAL" if item.get("modalidad") == "INDIVIDUAL" else "EQUIPO",
        "departamento": persona.get("departamento") or equipo.get("departamento") or "",
        "areaCompetencia": (item.get("area") or {}).get("nombre", ""),
        "nivel": (item.get("nivel") or {}).get("nombre", ""),
        "estado": item.get("estado", ""),
        "tutorLegal": tutor.get("nombreCompleto", ""),
    }


class InscritosApi:
    def __init__(self, client):
        self.client = client

    def list(self, tipo=None, page_size=1000):
        params = {"page": 1, "pageSize": page_size}
        if tipo:
            params["tipo"] = tipo
        resp = self.client.get("/api/inscritos", params=params) or {}
        return [inscrito_row(i) for i in resp.get("data") or []]


class InscripcionesApi:
    path = "/api/inscripciones/csv"

    def __init__(self, client):
        self.client = client

    def upload(self, filename, data):
        try:
            result = self.client.post(self.path, files={"archivo": (filename, data)})
        except ApiError as e:
            detalle = (e.payload or {}).get("detalle") if isinstance(e.payload, dict) else None
            faltantes = (detalle or {}).get("faltantes") or []
            if faltantes:
                raise ImportacionError(
                    f"{e.message} Faltan columnas: {', '.join(faltantes)}", missing=faltantes
                ) from e
            raise
        resumen = (result or {}).get("resumen") or {}
        logger.info(
            "Importación en servidor: %s procesadas, %s descartadas",
            resumen.get("totalProcesadas", 0), resumen.get("filasDescartadas", 0),
        )
        return result or {}
