import logging
from dataclasses import dataclass, field

from dateutil.parser import isoparse, parse as parse_date

from ohsansi.csv_io import parse_csv, write_rows
from ohsansi.errores import ImportacionError
from ohsansi.olimpistas import (
    OLYMPIAN_HEADERS,
    REQUIRED_FIELDS,
    REQUIRED_HEADERS,
    new_olympian,
)

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".csv", ".xls", ".xlsx")
LOCAL_EXTENSIONS = (".csv",)


@dataclass
class ImportResult:
    accepted: list = field(default_factory=list)
    errors: list = field(default_factory=list)  # [(fila, mensaje)]
    warnings: list = field(default_factory=list)

    @property
    def has_issues(self):
        return bool(self.errors or self.warnings)

    def summary(self):
        msg = f"Se importaron {len(self.accepted)} registros."
        if self.errors:
            msg += f" {len(self.errors)} filas rechazadas."
        if self.warnings:
            msg += f" {len(self.warnings)} advertencias."
        return msg

    def warning(self):
        """Mensaje de advertencia si hubo filas rechazadas; None si todo entró."""
        if not self.errors:
            return None
        if not self.accepted:
            return (
                f"No se importó ningún registro: las {len(self.errors)} filas "
                "fueron rechazadas. Descargue el reporte de errores."
            )
        return self.summary() + " Descargue el reporte de errores."


def normalize_header(name):
    return str(name).replace("\ufeff", "").strip().upper()


def missing_headers(header_row, required=None):
    required = REQUIRED_HEADERS if required is None else required
    present = {normalize_header(h) for h in header_row}
    return [h for h in required if h not in present]


def check_extension(filename, allowed=ALLOWED_EXTENSIONS):
    name = (filename or "").lower()
    if not name.endswith(tuple(allowed)):
        permitidos = ", ".join(allowed)
        raise ImportacionError(f"Solo se permiten archivos {permitidos}.")


def safe_parse_date(value):
    """Fecha libre -> 'YYYY-MM-DD'; None si no se puede interpretar."""
    value = (value or "").strip()
    if not value:
        return ""
    try:
        return isoparse(value).strftime("%Y-%m-%d")
    except ValueError:
        pass
    try:
        return parse_date(value, dayfirst=True).strftime("%Y-%m-%d")
    except (ValueError, OverflowError):
        return None


# ============================================================
# IMPORTACIÓN LOCAL DE OLIMPISTAS
# ============================================================

def read_olympians(text, required=None):
    """
    Valida encabezados y convierte cada fila en un olimpista nuevo.
    No toca el almacenamiento.
    """
    rows = parse_csv(text or "")
    if not rows:
        raise ImportacionError("El archivo está vacío.")

    header = [normalize_header(h) for h in rows[0]]
    faltan = missing_headers(header, required)
    if faltan:
        raise ImportacionError(
            "Faltan columnas obligatorias: " + ", ".join(faltan), missing=faltan
        )
    if len(rows) == 1:
        raise ImportacionError("El archivo no contiene registros.")

    index = {h: i for i, h in enumerate(header) if h in OLYMPIAN_HEADERS}
    result = ImportResult()

    for n, row in enumerate(rows[1:], start=2):
        if len(row) != len(header):
            result.warnings.append(
                (n, f"Se esperaban {len(header)} columnas y llegaron {len(row)}.")
            )
        fields = {h: (row[i].strip() if i < len(row) else "") for h, i in index.items()}

        faltan_valores = [f for f in REQUIRED_FIELDS if not fields.get(f)]
        if faltan_valores:
            result.errors.append(
                (n, "Campos obligatorios vacíos: " + ", ".join(faltan_valores))
            )
            continue

        if fields.get("OLI_F_NAC"):
            fecha = safe_parse_date(fields["OLI_F_NAC"])
            if fecha is None:
                result.warnings.append(
                    (n, f"Fecha de nacimiento no reconocida: {fields['OLI_F_NAC']}")
                )
            else:
                fields["OLI_F_NAC"] = fecha

        result.accepted.append(new_olympian(fields))

    return result


def import_olympians(text, store, required=None):
    result = read_olympians(text, required)
    if result.accepted:
        store.extend(result.accepted)
    logger.info(
        "Importación: %d aceptados, %d rechazados, %d advertencias",
        len(result.accepted), len(result.errors), len(result.warnings),
    )
    return result


def report_csv(result):
    rows = [["fila", "tipo", "mensaje"]]
    rows += [[str(n), "error", msg] for n, msg in result.errors]
    rows += [[str(n), "advertencia", msg] for n, msg in result.warnings]
    return write_rows(rows)


def server_report_csv(payload):
    """Reporte descargable a partir de la respuesta de /inscripciones/csv."""
    rows = [["fila", "tipo", "mensaje"]]
    for item in payload.get("errores_por_fila") or []:
        rows.append([str(item.get("fila", "")), "error", str(item.get("mensaje", ""))])
    for item in payload.get("advertencias_por_fila") or []:
        rows.append([str(item.get("fila", "")), "advertencia", str(item.get("mensaje", ""))])
    for item in payload.get("equipos_rechazados") or []:
        rows.append(["", "equipo rechazado", f"{item.get('equipo', '')}: {item.get('motivo', '')}"])
    return write_rows(rows)
