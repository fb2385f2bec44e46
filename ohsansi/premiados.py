import logging

from ohsansi.errores import ApiError

logger = logging.getLogger(__name__)

# ============================================================
# MEDALLAS
# ============================================================

MEDALLAS = {
    "ORO": "Oro",
    "PLATA": "Plata",
    "BRONCE": "Bronce",
    "MENCION": "Mención",
}

MEDAL_ICONS = {"ORO": "🥇", "PLATA": "🥈", "BRONCE": "🥉", "MENCION": "🎖️"}


def medalla_key(medalla):
    """'MENCIÓN', 'mencion', ... -> 'MENCION'; None si no hay medalla."""
    if not medalla:
        return None
    return str(medalla).strip().upper().replace("Ó", "O")


def etiqueta_medalla(medalla):
    return MEDALLAS.get(medalla_key(medalla), "Mención")


def distincion(medalla):
    return etiqueta_medalla(medalla) if medalla else "Sin medalla"


def contar_medallas(rows, field="medalla"):
    conteos = {"oro": 0, "plata": 0, "bronce": 0, "mencion": 0}
    for row in rows:
        key = medalla_key(row.get(field))
        if key in MEDALLAS:
            conteos[key.lower()] += 1
    return conteos


def modalidad_label(modalidad):
    return "Individual" if modalidad == "INDIVIDUAL" else "Grupal"


# ============================================================
# CONSULTA DE PREMIADOS Y GANADORES
# ============================================================

COLS_PREMIADOS = {
    "posicion": "Posición",
    "nombreCompleto": "Ganador / equipo",
    "modalidad": "Modalidad",
    "unidadEducativa": "Unidad educativa",
    "nota": "Nota",
    "distincion": "Distinción",
}

COLS_GANADORES = {
    "medalla": "Tipo de medalla",
    "nota": "Nota final",
    "ci": "Documento",
    "nombre_completo": "Nombre completo",
    "unidad_educativa": "Unidad educativa",
    "nombre_equipo": "Equipo",
    "integrantes": "Integrantes",
}


def premiado_row(item):
    return {
        "id": item.get("id"),
        "posicion": item.get("posicion"),
        "nombreCompleto": item.get("nombreCompleto") or "",
        "modalidad": modalidad_label(item.get("modalidad")),
        "unidadEducativa": item.get("unidadEducativa") or "",
        "nota": round(float(item.get("nota") or 0), 2),
        "medalla": item.get("medalla"),
        "distincion": distincion(item.get("medalla")),
    }


def ganador_row(g):
    integrantes = g.get("integrantes") or []
    return {
        "modalidad": g.get("modalidad"),
        "medalla": etiqueta_medalla(g.get("medalla")),
        "nota": round(float(g.get("nota") or 0), 2),
        "ci": g.get("ci") or "",
        "nombre_completo": g.get("nombre_completo") or "",
        "unidad_educativa": g.get("unidad_educativa") or "",
        "nombre_equipo": g.get("nombre_equipo") or "",
        "integrantes": ", ".join(i.get("nombre_completo", "") for i in integrantes),
    }


def niveles_de(filtros, area):
    for f in filtros:
        if f["area"] == area:
            return f["niveles"]
    return []


class PremiadosApi:
    def __init__(self, client):
        self.client = client

    def filtros(self, gestion=None):
        params = {"gestion": gestion} if gestion else None
        resp = self.client.get("/api/filtros/categorias", params=params) or {}
        return [
            {"area": f.get("area", ""), "niveles": list(f.get("niveles") or [])}
            for f in resp.get("data") or []
        ]

    def premiados(self, area, nivel, gestion):
        resp = self.client.get(
            "/api/premiados",
            params={"area": area, "nivel": nivel, "gestion": gestion},
        ) or {}
        rows = [premiado_row(i) for i in resp.get("data") or []]
        return {
            "premiados": rows,
            "total": resp.get("total", len(rows)),
            "medallero": resp.get("medallero"),
            "conteos": contar_medallas(rows),
        }

    def ganadores(self, area, nivel):
        resp = self.client.get(
            "/api/ganadores-certificados", params={"area": area, "nivel": nivel}
        ) or {}
        data = resp.get("data")
        if not isinstance(data, dict) or "categoria" not in data:
            raise ApiError("Ocurrió un error al consultar los ganadores.", payload=resp)
        data.setdefault("ganadores", [])
        return data

    def enviar_correos(self, area, nivel):
        resp = self.client.post(
            "/api/ganadores-certificados/enviar-correos", {"area": area, "nivel": nivel}
        ) or {}
        data = resp.get("data") or {}
        logger.info(
            "Correos %s/%s: %s enviados, %s fallidos",
            area, nivel, data.get("enviados", 0), data.get("fallidos", 0),
        )
        return resp.get("message") or (
            f"Se procesaron los correos. Enviados: {data.get('enviados', 0)}, "
            f"fallidos: {data.get('fallidos', 0)}."
        )


def puede_enviar_correos(data):
    """Los correos solo salen cuando la fase final terminó."""
    fase = (data or {}).get("fase_final") or {}
    return bool(data and data.get("ganadores")) and fase.get("estado") == "FINALIZADA"
