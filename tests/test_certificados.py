from ohsansi.certificados import (
    GANADORES_HEADERS,
    certificados_de,
    certificados_html,
    ganadores_csv,
    nombre_archivo,
    personas_desde_ganador,
    personas_desde_ganadores,
)
from ohsansi.csv_io import parse_csv

INDIVIDUAL = {
    "modalidad": "INDIVIDUAL", "medalla": "ORO", "nota": 95.5, "ci": "123",
    "nombre_completo": "Ana Rojas", "unidad_educativa": "Col. Bolívar",
    "nombre_equipo": None, "integrantes": [],
}
GRUPO = {
    "modalidad": "GRUPAL", "medalla": "MENCION", "nota": 70, "ci": "9",
    "nombre_completo": "Líder", "unidad_educativa": "UE Sucre", "nombre_equipo": "Los Pumas",
    "integrantes": [{"ci": "1", "nombre_completo": "Luis"}, {"ci": "2", "nombre_completo": "Eva"}],
}
DATA = {
    "categoria": {"gestion": 2025, "area": "Física", "nivel": "1ro Sec", "modalidad": "INDIVIDUAL"},
    "responsable": {"nombre_completo": "Dra. Vargas"},
    "fase_final": {"estado": "FINALIZADA", "correos_enviados": False},
    "ganadores": [INDIVIDUAL, GRUPO],
}


def test_individual_needs_ci_and_name():
    assert [p.nombre for p in personas_desde_ganador(INDIVIDUAL)] == ["Ana Rojas"]
    assert personas_desde_ganador(dict(INDIVIDUAL, ci=None)) == []


def test_group_gives_one_certificate_per_member():
    personas = personas_desde_ganador(GRUPO)
    assert [(p.ci, p.nombre) for p in personas] == [("1", "Luis"), ("2", "Eva")]
    assert all(p.unidad_educativa == "UE Sucre" for p in personas)


def test_group_without_members_falls_back_to_leader():
    personas = personas_desde_ganador(dict(GRUPO, integrantes=[]))
    assert [p.nombre for p in personas] == ["Líder"]


def test_html_has_one_page_per_person():
    out = certificados_html(personas_desde_ganadores(DATA["ganadores"]), "Física", "1ro Sec", 2025)
    assert out.count('class="page"') == 3
    assert "Olimpiada Científica – Área Física – Nivel 1ro Sec – Gestión 2025" in out
    assert "Nota final: 95.50" in out
    assert "participación individual" in out
    assert "participación en equipo" in out
    assert "Responsable de área" in out
    assert "window.print()" in out


def test_html_escapes_names():
    persona = personas_desde_ganador(dict(INDIVIDUAL, nombre_completo="<b>Ana</b>"))
    out = certificados_html(persona, "A&B", "N", 2025, responsable="<i>X</i>", imprimir=False)
    assert "<b>Ana</b>" not in out
    assert "&lt;b&gt;Ana&lt;/b&gt;" in out
    assert "Área A&amp;B" in out
    assert "&lt;i&gt;X&lt;/i&gt;" in out
    assert "window.print()" not in out


def test_certificados_de_uses_responsable():
    out = certificados_de(DATA, [INDIVIDUAL])
    assert "Dra. Vargas" in out
    assert out.count('class="page"') == 1
    assert certificados_de(DATA, [dict(INDIVIDUAL, ci="")]) is None


def test_ganadores_csv():
    rows = parse_csv(ganadores_csv(DATA))
    assert rows[0] == GANADORES_HEADERS
    assert rows[1] == ["INDIVIDUAL", "Oro", "95.50", "123", "Ana Rojas", "Col. Bolívar", ""]
    assert rows[2][1] == "Mención"
    assert rows[2][6] == "Los Pumas"


def test_nombre_archivo():
    assert nombre_archivo(DATA) == "ganadores_Física_1ro_Sec_gestion_2025.csv"
    assert nombre_archivo(DATA, "certificados", "html").endswith(".html")
