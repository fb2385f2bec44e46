import html
from dataclasses import dataclass

from ohsansi.csv_io import write_rows
from ohsansi.premiados import etiqueta_medalla

# ============================================================
# PERSONAS QUE RECIBEN CERTIFICADO
# ============================================================


@dataclass
class PersonaCert:
    ci: str
    nombre: str
    unidad_educativa: str
    medalla: str
    nota: float
    modalidad: str


def _persona(g, ci, nombre):
    return PersonaCert(
        ci=ci,
        nombre=nombre,
        unidad_educativa=g.get("unidad_educativa") or "",
        medalla=g.get("medalla"),
        nota=float(g.get("nota") or 0),
        modalidad=g.get("modalidad"),
    )


def personas_desde_ganador(g):
    """
    Un certificado por ganador individual, uno por integrante en los grupos.
    Si un grupo llega sin integrantes se usa el líder.
    """
    if g.get("modalidad") != "INDIVIDUAL":
        integrantes = g.get("integrantes") or []
        if integrantes:
            return [_persona(g, i.get("ci", ""), i.get("nombre_completo", "")) for i in integrantes]
    if not g.get("ci") or not g.get("nombre_completo"):
        return []
    return [_persona(g, g["ci"], g["nombre_completo"])]


def personas_desde_ganadores(ganadores):
    personas = []
    for g in ganadores:
        personas.extend(personas_desde_ganador(g))
    return personas


# ============================================================
# HTML IMPRIMIBLE (A4 HORIZONTAL, UNA PÁGINA POR PERSONA)
# ============================================================

CERT_CSS = """
* { box-sizing: border-box; }
@page { size: A4 landscape; margin: 0; }
body { font-family: system-ui, "Segoe UI", sans-serif; margin: 0; padding: 24px; background: #f3f4f6; }
.page { width: 29.7cm; min-height: 21cm; margin: 0 auto 24px auto; padding: 32px 40px;
        background: white; border-radius: 24px; border: 1px solid #fbbf24; }
.title { text-align: center; margin-bottom: 12px; }
.title h1 { font-size: 26px; margin: 0; letter-spacing: 2px; text-transform: uppercase; }
.subtitle, .ci, .ue { text-align: center; color: #4b5563; }
.subtitle { font-size: 12px; margin-bottom: 24px; }
.name { text-align: center; font-size: 20px; font-weight: 600; margin-bottom: 4px; }
.ci, .ue { font-size: 11px; margin-bottom: 4px; }
.badge-row { text-align: center; margin: 12px 0 16px 0; }
.badge, .badge-secondary { display: inline-block; border-radius: 999px; padding: 4px 14px;
                           font-size: 11px; margin-right: 6px; }
.badge { border: 1px solid #fbbf24; background: #fffbeb; font-weight: 600; color: #92400e; }
.badge-secondary { border: 1px solid #d1d5db; background: #f9fafb; color: #374151; }
.text { font-size: 11px; color: #374151; text-align: center; max-width: 600px; margin: 0 auto 20px auto; }
.footer { margin-top: 32px; display: flex; justify-content: space-between; align-items: center;
          font-size: 10px; color: #4b5563; }
.firma { text-align: center; }
.firma-line { height: 1px; width: 220px; background: #6b7280; margin: 0 auto 6px auto; }
.firma-nombre { font-weight: 600; color: #111827; }
.firma-cargo { text-transform: uppercase; letter-spacing: 1px; }
@media print {
  body { background: white; padding: 0; }
  .page { page-break-after: always; margin: 0; border-radius: 0; }
}
"""

PAGE = """
<div class="page">
  <div class="title"><h1>Certificado de Reconocimiento</h1></div>
  <div class="subtitle">Olimpiada Científica – Área {area} – Nivel {nivel} – Gestión {gestion}</div>
  <div class="name">{nombre}</div>
  <div class="ci">Documento de identidad: <strong>{ci}</strong></div>
  <div class="ue">Unidad educativa: <strong>{unidad_educativa}</strong></div>
  <div class="badge-row">
    <span class="badge">{medalla}</span>
    <span class="badge-secondary">Nota final: {nota:.2f}</span>
    <span class="badge-secondary">{modalidad}</span>
  </div>
  <p class="text">
    En reconocimiento a su destacado desempeño académico en la Olimpiada Científica,
    obteniendo la distinción indicada y demostrando compromiso, esfuerzo y excelencia.
  </p>
  <div class="footer">
    <div></div>
    <div class="firma">
      <div class="firma-line"></div>
      <div class="firma-nombre">{responsable}</div>
      <div class="firma-cargo">Responsable de la categoría</div>
    </div>
    <div>Sistema de Gestión de Olimpiadas<br/>Gestión {gestion}</div>
  </div>
</div>
"""

PRINT_SCRIPT = "<script>window.addEventListener('load', () => window.print());</script>"


def certificados_html(personas, area, nivel, gestion, responsable=None, imprimir=True):
    e = html.escape
    paginas = []
    for p in personas:
        paginas.append(PAGE.format(
            area=e(str(area)),
            nivel=e(str(nivel)),
            gestion=e(str(gestion)),
            nombre=e(p.nombre),
            ci=e(p.ci),
            unidad_educativa=e(p.unidad_educativa),
            medalla=etiqueta_medalla(p.medalla),
            nota=p.nota,
            modalidad=(
                "participación individual" if p.modalidad == "INDIVIDUAL"
                else "participación en equipo"
            ),
            responsable=e(responsable or "Responsable de área"),
        ))
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\" />\n"
        f"<title>Certificados</title>\n<style>{CERT_CSS}</style>\n</head>\n"
        f"<body>{''.join(paginas)}{PRINT_SCRIPT if imprimir else ''}</body>\n</html>"
    )


def certificados_de(data, ganadores=None):
    """HTML de certificados para una respuesta de /ganadores-certificados."""
    categoria = data["categoria"]
    responsable = (data.get("responsable") or {}).get("nombre_completo")
    personas = personas_desde_ganadores(data["ganadores"] if ganadores is None else ganadores)
    if not personas:
        return None
    return certificados_html(
        personas,
        categoria.get("area", ""),
        categoria.get("nivel", ""),
        categoria.get("gestion", ""),
        responsable=responsable,
    )


# ============================================================
# EXPORTACIÓN CSV DE GANADORES
# ============================================================

GANADORES_HEADERS = [
    "Modalidad",
    "Tipo de medalla",
    "Nota final",
    "Documento de identidad",
    "Nombre completo",
    "Unidad educativa",
    "Nombre de equipo",
]


def ganadores_csv(data):
    rows = [GANADORES_HEADERS]
    for g in data.get("ganadores") or []:
        rows.append([
            g.get("modalidad") or "",
            etiqueta_medalla(g.get("medalla")),
            f"{float(g.get('nota') or 0):.2f}",
            g.get("ci") or "",
            g.get("nombre_completo") or "",
            g.get("unidad_educativa") or "",
            g.get("nombre_equipo") or "",
        ])
    return write_rows(rows)


def nombre_archivo(data, prefijo="ganadores", extension="csv"):
    c = data["categoria"]
    nombre = f"{prefijo}_{c.get('area', '')}_{c.get('nivel', '')}_gestion_{c.get('gestion', '')}"
    return nombre.replace(" ", "_") + "." + extension
