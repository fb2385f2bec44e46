"""Tests for importing olympians from CSV into the local store."""

import pytest

from ohsansi.almacen import MemoryStorage
from ohsansi.csv_io import parse_csv, write_rows
from ohsansi.errores import ImportacionError
from ohsansi.importacion import (
    check_extension,
    import_olympians,
    missing_headers,
    read_olympians,
    report_csv,
    safe_parse_date,
    server_report_csv,
)
from ohsansi.olimpistas import OLYMPIAN_HEADERS, REQUIRED_HEADERS, OlympianStore


def make_csv(rows, headers=OLYMPIAN_HEADERS):
    body = [[r.get(h, "") for h in headers] for r in rows]
    return write_rows([list(headers)] + body)


ANA = {
    "OLI_NOMBRE": "Ana",
    "OLI_AP_PAT": "Rojas",
    "OLI_DEPTO": "Cochabamba",
    "AREA_NOM": "Física",
    "NIVEL_NOM": "Primero",
    "OLI_F_NAC": "2010-03-05",
}


@pytest.fixture
def store():
    return OlympianStore(MemoryStorage())


def test_import_valid_rows(store):
    luis = dict(ANA, OLI_NOMBRE="Luis", OLI_F_NAC="")
    result = import_olympians(make_csv([ANA, luis]), store)

    assert len(result.accepted) == 2
    assert not result.has_issues
    saved = store.load()
    assert [r["OLI_NOMBRE"] for r in saved] == ["Ana", "Luis"]
    assert all(r["id"] for r in saved)
    assert saved[0]["TIPO_PART"] == "Individual"


def test_missing_column_rejects_whole_file(store):
    headers = [h for h in OLYMPIAN_HEADERS if h != "OLI_NOMBRE"]
    with pytest.raises(ImportacionError) as exc:
        import_olympians(make_csv([ANA], headers=headers), store)

    assert exc.value.missing == ["OLI_NOMBRE"]
    assert "OLI_NOMBRE" in str(exc.value)
    assert store.load() == []


def test_team_columns_are_optional(store):
    result = import_olympians(make_csv([ANA], headers=REQUIRED_HEADERS), store)
    assert len(result.accepted) == 1
    assert result.accepted[0]["EQUIPO_NOMBRE"] == ""


def test_headers_are_normalized():
    header = ["\ufeff tipo_part "] + [h.lower() for h in REQUIRED_HEADERS[1:]]
    assert missing_headers(header) == []
    assert missing_headers(header[1:]) == ["TIPO_PART"]


def test_empty_file_is_error(store):
    with pytest.raises(ImportacionError, match="vacío"):
        import_olympians("", store)


def test_header_only_file_is_error(store):
    with pytest.raises(ImportacionError, match="no contiene registros"):
        import_olympians(",".join(OLYMPIAN_HEADERS), store)


def test_rows_with_empty_required_values_are_rejected(store):
    sin_area = dict(ANA, AREA_NOM="")
    result = import_olympians(make_csv([ANA, sin_area]), store)

    assert len(result.accepted) == 1
    assert result.errors == [(3, "Campos obligatorios vacíos: AREA_NOM")]
    assert len(store.load()) == 1


def test_all_rows_rejected_is_reported_as_warning(store):
    result = import_olympians(make_csv([dict(ANA, AREA_NOM=""), dict(ANA, OLI_NOMBRE="")]), store)

    assert result.accepted == []
    assert len(result.errors) == 2
    assert result.warning().startswith("No se importó ningún registro")
    assert store.load() == []


def test_partial_import_warning_mentions_rejections(store):
    result = import_olympians(make_csv([ANA, dict(ANA, AREA_NOM="")]), store)
    assert "1 filas rechazadas" in result.warning()


def test_clean_import_has_no_warning(store):
    assert import_olympians(make_csv([ANA]), store).warning() is None


def test_bad_date_is_warning_not_error():
    result = read_olympians(make_csv([dict(ANA, OLI_F_NAC="ayer")]))
    assert len(result.accepted) == 1
    assert result.accepted[0]["OLI_F_NAC"] == "ayer"
    assert result.warnings[0][0] == 2


def test_dates_are_normalized():
    result = read_olympians(make_csv([dict(ANA, OLI_F_NAC="05/03/2010")]))
    assert result.accepted[0]["OLI_F_NAC"] == "2010-03-05"


def test_short_row_is_warning():
    text = make_csv([ANA]) + "\nSolo,una,fila"
    result = read_olympians(text)
    assert any("columnas" in msg for _, msg in result.warnings)
    assert len(result.errors) == 1


def test_safe_parse_date():
    assert safe_parse_date("") == ""
    assert safe_parse_date("2010-12-01") == "2010-12-01"
    assert safe_parse_date("01/12/2010") == "2010-12-01"
    assert safe_parse_date("no es fecha") is None


def test_check_extension():
    check_extension("olimpistas.CSV")
    check_extension("datos.xlsx")
    with pytest.raises(ImportacionError):
        check_extension("datos.xlsx", (".csv",))
    with pytest.raises(ImportacionError):
        check_extension(None)


def test_report_csv_lists_errors_and_warnings(store):
    sin_area = dict(ANA, AREA_NOM="")
    mala_fecha = dict(ANA, OLI_F_NAC="ayer")
    result = import_olympians(make_csv([sin_area, mala_fecha]), store)

    rows = parse_csv(report_csv(result))
    assert rows[0] == ["fila", "tipo", "mensaje"]
    assert rows[1][:2] == ["2", "error"]
    assert rows[2][:2] == ["3", "advertencia"]


def test_server_report_csv():
    payload = {
        "errores_por_fila": [{"fila": 4, "mensaje": "CI duplicado"}],
        "advertencias_por_fila": [{"fila": 6, "mensaje": "Sin correo"}],
        "equipos_rechazados": [{"equipo": "Los Pumas", "motivo": "incompleto"}],
    }
    rows = parse_csv(server_report_csv(payload))
    assert rows[1] == ["4", "error", "CI duplicado"]
    assert rows[2] == ["6", "advertencia", "Sin correo"]
    assert rows[3] == ["", "equipo rechazado", "Los Pumas: incompleto"]
