from datetime import date

import pandas as pd
import streamlit as st

from ohsansi.catalogos import InscritosApi
from ohsansi.errores import ApiError
from ohsansi.premiados import COLS_PREMIADOS, MEDAL_ICONS, MEDALLAS, PremiadosApi, niveles_de
from ohsansi.tarjetas import card_html, lista_html
from ohsansi.ui import get_catalogos, get_client, render_table

# ============================================================
# CONFIG STREAMLIT
# ============================================================
st.set_page_config(page_title="Olimpiada Oh! SanSí", page_icon="🏅", layout="wide")

st.markdown(
    "<h1 style='text-align:center;'>🏅 Olimpiada Oh! SanSí</h1>",
    unsafe_allow_html=True,
)

hide_streamlit_style = """
    <style>
        #MainMenu {visibility: hidden !important;}
        footer {visibility: hidden !important;}
        div[data-testid="stToolbar"] { display: none !important; }
    </style>
"""
st.markdown(hide_streamlit_style, unsafe_allow_html=True)

COLS_INSCRITOS = {
    "nombreCompleto": "Nombre",
    "modalidad": "Modalidad",
    "areaCompetencia": "Área",
    "nivel": "Nivel",
    "departamento": "Departamento",
    "unidadEducativa": "Unidad educativa",
}

# ============================================================
# CARGA DE DATOS
# ============================================================

areas_api, niveles_api = get_catalogos()


def load_catalogo(api, nombre):
    try:
        return [c for c in api.list() if c.estado]
    except ApiError as e:
        st.error(f"No se pudieron cargar {nombre}: {e.message}")
        return []


areas = load_catalogo(areas_api, "las áreas")
niveles = load_catalogo(niveles_api, "los niveles")

try:
    inscritos_df = pd.DataFrame(
        InscritosApi(get_client()).list(),
        columns=["id", "estado", "tutorLegal"] + list(COLS_INSCRITOS),
    )
except ApiError as e:
    if e.status == 401:
        st.info("La lista de inscritos solo está disponible para usuarios con sesión.")
    else:
        st.error(e.message)
    inscritos_df = None

st.markdown("---")

# ============================================================
# TARJETAS RESUMEN
# ============================================================

col1, col2, col3 = st.columns(3)

with col1:
    st.markdown(card_html("📚", "Áreas activas", len(areas)), unsafe_allow_html=True)
with col2:
    st.markdown(card_html("🎯", "Niveles activos", len(niveles)), unsafe_allow_html=True)
with col3:
    total = "-" if inscritos_df is None else len(inscritos_df)
    st.markdown(card_html("👥", "Inscritos", total), unsafe_allow_html=True)

st.markdown("---")

# ============================================================
# ÁREAS Y NIVELES COMO TARJETAS
# ============================================================

col_a, col_n = st.columns(2)
with col_a:
    st.markdown(lista_html("📚 Áreas de competencia", areas), unsafe_allow_html=True)
with col_n:
    st.markdown(lista_html("🎯 Niveles", niveles), unsafe_allow_html=True)

st.markdown("---")

# ============================================================
# INSCRITOS POR ÁREA + LISTA
# ============================================================

if inscritos_df is not None:
    st.subheader("📊 Inscritos por área")
    if inscritos_df.empty:
        st.info("Aún no hay inscritos.")
    else:
        por_area = (
            inscritos_df.groupby("areaCompetencia").size()
            .rename("Inscritos")
            .sort_values(ascending=False)
        )
        st.bar_chart(por_area)

        st.subheader("👥 Lista de inscritos")
        render_table("inscritos", inscritos_df, COLS_INSCRITOS)

st.markdown("---")

# ============================================================
# CONSULTA DE PREMIADOS
# ============================================================

st.subheader("🏆 Consulta de premiados")

gestion = date.today().year
premiados_api = PremiadosApi(get_client())
try:
    filtros = premiados_api.filtros(gestion=gestion)
except ApiError as e:
    st.error(f"No se pudieron cargar las categorías: {e.message}")
    filtros = []

st.caption(f"Ganadores por área y nivel. Gestión {gestion}.")
col_ar, col_ni, col_bt = st.columns([2, 2, 1])
with col_ar:
    area_sel = st.selectbox(
        "Área", [f["area"] for f in filtros], index=None, placeholder="Seleccione un área"
    )
with col_ni:
    nivel_sel = st.selectbox(
        "Nivel", niveles_de(filtros, area_sel), index=None,
        placeholder="Seleccione un nivel", disabled=not area_sel,
    )
with col_bt:
    st.write("")
    buscar = st.button("Buscar", disabled=not (area_sel and nivel_sel))

if buscar:
    try:
        st.session_state["premiados"] = premiados_api.premiados(area_sel, nivel_sel, gestion)
    except ApiError as e:
        st.session_state.pop("premiados", None)
        st.error(e.message or "No se pudieron cargar los premiados.")

resultado = st.session_state.get("premiados")
if resultado:
    conteos = resultado["conteos"]
    cols = st.columns(4)
    for col, (key, label) in zip(cols, MEDALLAS.items()):
        with col:
            st.markdown(
                card_html(MEDAL_ICONS[key], label, conteos[key.lower()]),
                unsafe_allow_html=True,
            )

    medallero = resultado.get("medallero")
    if medallero:
        st.caption(
            "Configuración de medallero: "
            f"Oro {medallero.get('oros_final', 0)} · Plata {medallero.get('platas_final', 0)} · "
            f"Bronce {medallero.get('bronces_final', 0)} · Mención {medallero.get('menciones_final', 0)}"
        )

    premiados_df = pd.DataFrame(resultado["premiados"], columns=["id", "medalla"] + list(COLS_PREMIADOS))
    if premiados_df.empty:
        st.info("No hay premiados registrados para esta categoría.")
    else:
        st.caption(f"Total de premiados: {resultado['total']}")
        render_table("premiados", premiados_df, COLS_PREMIADOS)
