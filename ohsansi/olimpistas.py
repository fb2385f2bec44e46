import json
import logging
import uuid

import gspread
import pandas as pd
from google.oauth2.service_account import Credentials
from gspread_dataframe import get_as_dataframe, set_with_dataframe

from ohsansi.config import SCOPES
from ohsansi.errores import ValidationError

logger = logging.getLogger(__name__)

# ============================================================
# COLUMNAS DEL OLIMPISTA
# ============================================================

OLYMPIAN_HEADERS = [
    "TIPO_PART", "AREA_COD", "AREA_NOM", "NIVEL_COD", "NIVEL_NOM",
    "OLI_TDOC", "OLI_NRODOC", "OLI_NOMBRE", "OLI_AP_PAT", "OLI_AP_MAT",
    "OLI_UNID_EDU", "OLI_DEPTO", "OLI_GRADO", "OLI_F_NAC", "OLI_SEXO",
    "OLI_CORREO", "TUTOR_TDOC", "TUTOR_NRODOC", "TUTOR_NOMBRE",
    "TUTOR_AP_PAT", "TUTOR_AP_MAT", "TUTOR_TEL", "TUTOR_CORREO",
    "TUTOR_UNID_EDU", "TUTOR_PROF", "EQUIPO_NOMBRE", "ROL_EQUIPO",
]

# Solo aplican a participación grupal
TEAM_HEADERS = ["EQUIPO_NOMBRE", "ROL_EQUIPO"]

REQUIRED_HEADERS = [h for h in OLYMPIAN_HEADERS if h not in TEAM_HEADERS]

REQUIRED_FIELDS = ["OLI_NOMBRE", "OLI_AP_PAT", "OLI_DEPTO", "AREA_NOM", "NIVEL_NOM"]

COLS_OLIMPISTAS = ["id"] + OLYMPIAN_HEADERS

# Columnas visibles en la tabla del panel
TABLE_COLUMNS = {
    "OLI_NOMBRE": "Nombre",
    "OLI_AP_PAT": "Ap. paterno",
    "OLI_AP_MAT": "Ap. materno",
    "TIPO_PART": "Modalidad",
    "AREA_NOM": "Área",
    "NIVEL_NOM": "Nivel",
    "OLI_DEPTO": "Departamento",
    "EQUIPO_NOMBRE": "Equipo",
}

LS_KEY = "olympians:v4"


def new_olympian(fields):
    row = {h: str(fields.get(h, "") or "") for h in OLYMPIAN_HEADERS}
    row["TIPO_PART"] = row["TIPO_PART"] or "Individual"
    row["id"] = uuid.uuid4().hex
    return row


def missing_required(fields):
    return [f for f in REQUIRED_FIELDS if not str(fields.get(f, "") or "").strip()]


def ensure_columns(df, columns):
    for c in columns:
        if c not in df.columns:
            df[c] = ""
    return df[columns]


# ============================================================
# REPOSITORIO DE OLIMPISTAS
# ============================================================

class _BaseStore:
    def load(self):
        raise NotImplementedError

    def save(self, rows):
        raise NotImplementedError

    def add(self, fields):
        faltan = missing_required(fields)
        if faltan:
            raise ValidationError({f: "Campo obligatorio" for f in faltan})
        row = new_olympian(fields)
        rows = self.load()
        rows.append(row)
        self.save(rows)
        return row

    def extend(self, new_rows):
        rows = self.load()
        rows.extend(new_rows)
        self.save(rows)
        return len(new_rows)

    def delete(self, olympian_id):
        rows = self.load()
        kept = [r for r in rows if r.get("id") != olympian_id]
        if len(kept) == len(rows):
            return False
        self.save(kept)
        logger.info("Olimpista %s eliminado", olympian_id)
        return True

    def as_dataframe(self):
        rows = self.load()
        if not rows:
            return pd.DataFrame(columns=COLS_OLIMPISTAS)
        df = pd.DataFrame(rows)
        return ensure_columns(df.fillna(""), COLS_OLIMPISTAS)


class OlympianStore(_BaseStore):
    """Lista de olimpistas serializada como JSON bajo una sola clave."""

    def __init__(self, storage, key=LS_KEY):
        self.storage = storage
        self.key = key

    def load(self):
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Contenido inválido en la clave %s; se ignora", self.key)
            return []
        if not isinstance(data, list):
            return []
        return [dict(r) for r in data if isinstance(r, dict)]

    def save(self, rows):
        self.storage.set_item(self.key, json.dumps(rows, ensure_ascii=False))


class SheetsOlympianStore(_BaseStore):
    """Misma interfaz, guardando la tabla en una hoja de Google Sheets."""

    def __init__(self, worksheet):
        self.worksheet = worksheet

    def load(self):
        df = get_as_dataframe(self.worksheet, evaluate_formulas=True, header=0, dtype=str)
        df = df.dropna(how="all")
        if df.empty:
            return []
        df = ensure_columns(df.fillna(""), COLS_OLIMPISTAS)
        return df.to_dict("records")

    def save(self, rows):
        df = pd.DataFrame(rows)
        df = ensure_columns(df, COLS_OLIMPISTAS).fillna("")
        self.worksheet.clear()
        set_with_dataframe(self.worksheet, df)


def open_worksheet(service_account_info, sheet_name, worksheet_name="olimpistas"):
    creds = Credentials.from_service_account_info(service_account_info, scopes=SCOPES)
    client = gspread.authorize(creds)
    spreadsheet = client.open(sheet_name)
    return spreadsheet.worksheet(worksheet_name)
