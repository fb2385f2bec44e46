import logging
from functools import partial

import pandas as pd
import streamlit as st

from ohsansi.auth import AuthApi, role_label
from ohsansi.catalogos import Catalogo, EvaluadoresApi, InscripcionesApi, MedallasApi
from ohsansi.certificados import certificados_de, ganadores_csv, nombre_archivo
from ohsansi.csv_io import decode_upload, to_csv
from ohsansi.errores import ApiError, OhSansiError, ValidationError
from ohsansi.fases import ESTADOS, HISTORIAL_COLUMNS, HISTORIAL_PAGE_SIZE
from ohsansi.importacion import (
    ALLOWED_EXTENSIONS,
    LOCAL_EXTENSIONS,
    ImportResult,
    check_extension,
    import_olympians,
    report_csv,
    server_report_csv,
)
from ohsansi.listado import DESC, filter_rows, sort_rows
from ohsansi.olimpistas import OLYMPIAN_HEADERS, TABLE_COLUMNS
from ohsansi.premiados import (
    COLS_GANADORES,
    PremiadosApi,
    ganador_row,
    niveles_de,
    puede_enviar_correos,
)
from ohsansi.ui import (
    get_auth,
    get_catalogos,
    get_client,
    get_coordinator,
    get_fases,
    get_list_state,
    get_settings,
    get_store,
    guarded,
    render_modal,
    render_table,
)
from ohsansi.validacion import (
    EVALUADOR_SCHEMA,
    MEDALLAS_SCHEMA,
    has_errors,
    sanitize_form,
    validate_form,
)

logger = logging.getLogger(__name__)

# ============================================================
# CONFIG STREAMLIT
# ============================================================
st.set_page_config(page_title="Panel administrador – Oh! SanSí", page_icon="🏅", layout="wide")

st.title("🏅 Panel administrador – Olimpiada Oh! SanSí")

settings = get_settings()
coordinator = get_coordinator()
auth = get_auth()


# ============================================================
# LOGIN CONTRA EL BACKEND
# ============================================================

def check_login():
    if not settings.require_login or auth.is_logged_in():
        return True

    st.subheader("🔐 Iniciar sesión")

    with st.form("login_form"):
        correo = st.text_input("Correo")
        contrasena = st.text_input("Contraseña", type="password")
        submit = st.form_submit_button("Entrar")

    if submit:
        try:
            AuthApi(get_client(), auth).login(correo.strip(), contrasena)
        except ApiError as e:
            st.error(e.message)
        else:
            st.rerun()

    return False


if not check_login():
    st.stop()

user = auth.user()
if user:
    col_u, col_s = st.columns([4, 1])
    with col_u:
        st.caption(f"👤 {user.get('nombreCompleto', '')} — {role_label(user.get('rol'))}")
    with col_s:
        if st.button("Cerrar sesión"):
            try:
                AuthApi(get_client(), auth).logout()
            except ApiError as e:
                logger.warning("Logout: %s", e)
            st.rerun()


# ============================================================
# TABS PRINCIPALES
# ============================================================

tab1, tab2, tab3, tab4, tab5, tab6, tab7 = st.tabs([
    "👥 Olimpistas",
    "📥 Importar CSV",
    "🏷️ Áreas y niveles",
    "🥇 Medallas",
    "🧑‍⚖️ Evaluadores",
    "🚦 Fases",
    "🏆 Ganadores y certificados",
])

store = get_store()


# ============================================================
# TAB 1: OLIMPISTAS
# ============================================================

with tab1:
    st.subheader("Registrar nuevo olimpista")

    with st.form("form_olimpista", clear_on_submit=True):
        col_a, col_b, col_c = st.columns(3)
        with col_a:
            tipo = st.selectbox("Modalidad", ["Individual", "Grupal"])
            nombre = st.text_input("Nombre *")
            ap_pat = st.text_input("Apellido paterno *")
            ap_mat = st.text_input("Apellido materno")
            nrodoc = st.text_input("Documento (CI)")
        with col_b:
            area = st.text_input("Área *")
            nivel = st.text_input("Nivel *")
            depto = st.text_input("Departamento *")
            unid_edu = st.text_input("Unidad educativa")
            grado = st.text_input("Grado")
        with col_c:
            tutor = st.text_input("Nombre del tutor")
            tutor_tel = st.text_input("Teléfono del tutor")
            equipo = st.text_input("Equipo (solo grupal)")
            rol_equipo = st.text_input("Rol en el equipo")
        guardar = st.form_submit_button("Guardar olimpista", key="guardar_olimpista")

    if guardar:
        fields = {
            "TIPO_PART": tipo,
            "OLI_TDOC": "CI",
            "OLI_NRODOC": nrodoc,
            "OLI_NOMBRE": nombre,
            "OLI_AP_PAT": ap_pat,
            "OLI_AP_MAT": ap_mat,
            "AREA_NOM": area,
            "NIVEL_NOM": nivel,
            "OLI_DEPTO": depto,
            "OLI_UNID_EDU": unid_edu,
            "OLI_GRADO": grado,
            "TUTOR_NOMBRE": tutor,
            "TUTOR_TEL": tutor_tel,
            "EQUIPO_NOMBRE": equipo,
            "ROL_EQUIPO": rol_equipo,
        }
        try:
            store.add(fields)
        except ValidationError as e:
            st.error("Por favor completa los campos obligatorios: " + ", ".join(e.errors))
        else:
            coordinator.success(
                message=f"Olimpista {nombre} registrado correctamente.",
                focus="guardar_olimpista",
            )

    st.markdown("---")
    st.subheader("Lista de olimpistas")

    olimpistas_df = store.as_dataframe()
    if olimpistas_df.empty:
        st.info("Aún no hay olimpistas registrados.")
    else:
        page, selected = render_table(
            "olimpistas",
            olimpistas_df,
            TABLE_COLUMNS,
            search_columns=OLYMPIAN_HEADERS,
            selectable=True,
        )

        state = get_list_state("olimpistas")
        exportables = sort_rows(
            filter_rows(olimpistas_df, state.query, OLYMPIAN_HEADERS),
            state.sort_key,
            state.sort_dir,
        )

        col_e, col_d = st.columns(2)
        with col_e:
            st.download_button(
                "⬇️ Exportar CSV",
                data=to_csv(exportables.to_dict("records")),
                file_name="olimpistas.csv",
                mime="text/csv",
            )
        with col_d:
            if st.button("🗑️ Eliminar seleccionado", key="eliminar_olimpista", disabled=selected is None):
                nombre_sel = f"{selected['OLI_NOMBRE']} {selected['OLI_AP_PAT']}".strip()
                coordinator.delete(
                    message=f"¿Eliminar a {nombre_sel}? Esta acción no se puede deshacer.",
                    focus="eliminar_olimpista",
                    on_confirm=guarded(
                        partial(store.delete, selected["id"]),
                        f"Se eliminó a {nombre_sel}.",
                    ),
                )
                st.rerun()


# ============================================================
# TAB 2: IMPORTAR CSV
# ============================================================

def _import_local(name, data):
    check_extension(name, LOCAL_EXTENSIONS)
    result = import_olympians(decode_upload(data), store)
    st.session_state["import_result"] = ("local", result)
    return result


def _import_server(name, data):
    check_extension(name, ALLOWED_EXTENSIONS)
    result = InscripcionesApi(get_client()).upload(name, data)
    st.session_state["import_result"] = ("servidor", result)
    return result


with tab2:
    st.subheader("Importar olimpistas")

    destino = st.radio(
        "Destino de la importación",
        ["Panel (almacenamiento local)", "Servidor (inscripciones)"],
        horizontal=True,
    )
    extensiones = LOCAL_EXTENSIONS if destino.startswith("Panel") else ALLOWED_EXTENSIONS
    archivo = st.file_uploader(
        "Sube aquí tu archivo",
        type=[e.lstrip(".") for e in extensiones],
        help="El archivo debe traer las columnas OLI_NOMBRE, OLI_AP_PAT, AREA_NOM, ...",
    )

    with st.expander("Columnas esperadas"):
        st.code(",".join(OLYMPIAN_HEADERS))

    if st.button("Subir registros", key="subir_registros", type="primary", disabled=archivo is None):
        data = archivo.getvalue()
        local = destino.startswith("Panel")
        importer = _import_local if local else _import_server
        coordinator.confirm(
            title="Confirmar importación",
            message=f"¿Importar los registros de {archivo.name}?",
            focus="subir_registros",
            on_confirm=guarded(
                partial(importer, archivo.name, data),
                "Importación terminada.",
                error_title="No se pudo importar",
                check=ImportResult.warning if local else None,
                warning_title="Importación con errores",
            ),
        )
        st.rerun()

    if "import_result" in st.session_state:
        origen, result = st.session_state["import_result"]
        st.markdown("---")
        if origen == "local":
            if result.errors:
                st.warning(result.warning())
            else:
                st.success(result.summary())
            if result.has_issues:
                st.download_button(
                    "Descargar reporte de errores",
                    data=report_csv(result),
                    file_name="reporte_importacion.csv",
                    mime="text/csv",
                )
        else:
            resumen = result.get("resumen") or {}
            c1, c2, c3 = st.columns(3)
            c1.metric("Filas procesadas", resumen.get("totalProcesadas", 0))
            c2.metric("Inscritos individuales", resumen.get("insertadasIndividual", 0))
            c3.metric("Filas descartadas", resumen.get("filasDescartadas", 0))
            if result.get("mensaje_exito"):
                st.success(result["mensaje_exito"])
            if result.get("errores_por_fila") or result.get("advertencias_por_fila"):
                st.download_button(
                    "Descargar reporte de errores",
                    data=server_report_csv(result),
                    file_name="reporte_importacion.csv",
                    mime="text/csv",
                )


# ============================================================
# TAB 3: ÁREAS Y NIVELES
# ============================================================

COLS_CATALOGO = {"codigo": "Código", "nombre": "Nombre", "descripcion": "Descripción", "estado": "Activo"}


def render_catalogo(titulo, api, key):
    st.subheader(titulo)

    if st.button("🔄 Recargar", key=f"{key}_recargar"):
        api.cache.invalidate()

    try:
        items = api.list()
    except ApiError as e:
        st.error(e.message)
        return

    df = pd.DataFrame([vars(i) for i in items], columns=["id"] + list(COLS_CATALOGO))
    if df.empty:
        st.info("No hay registros.")
        selected = None
    else:
        _, selected = render_table(key, df, COLS_CATALOGO, selectable=True)

    # La clave cambia con la fila elegida para que el formulario se rellene de nuevo
    sel_id = selected["id"] if selected else "nuevo"
    with st.form(f"{key}_form", clear_on_submit=True):
        st.write("Editar seleccionado" if selected else "Agregar nuevo")
        codigo = st.text_input(
            "Código", value=selected["codigo"] if selected else "", key=f"{key}_codigo_{sel_id}"
        )
        nombre = st.text_input(
            "Nombre", value=selected["nombre"] if selected else "", key=f"{key}_nombre_{sel_id}"
        )
        descripcion = st.text_area(
            "Descripción",
            value=selected["descripcion"] if selected else "",
            height=80,
            key=f"{key}_desc_{sel_id}",
        )
        guardar = st.form_submit_button("Guardar", key=f"{key}_guardar")

    if guardar:
        if not codigo.strip() or not nombre.strip():
            st.error("El código y el nombre son obligatorios.")
        else:
            item = Catalogo(codigo=codigo.strip(), nombre=nombre.strip(), descripcion=descripcion.strip())
            if selected:
                action = partial(api.update, int(selected["id"]), item)
            else:
                action = partial(api.create, item)
            coordinator.confirm(
                message=f"¿Guardar {item.nombre}?",
                focus=f"{key}_guardar",
                on_confirm=guarded(action, f"{item.nombre} guardado correctamente."),
            )
            st.rerun()

    if selected and st.button("🗑️ Desactivar seleccionado", key=f"{key}_borrar"):
        coordinator.delete(
            message=f"¿Desactivar {selected['nombre']}?",
            focus=f"{key}_borrar",
            on_confirm=guarded(
                partial(api.delete, int(selected["id"])),
                f"{selected['nombre']} fue desactivado.",
            ),
        )
        st.rerun()


with tab3:
    areas_api, niveles_api = get_catalogos()
    col_areas, col_niveles = st.columns(2)
    with col_areas:
        render_catalogo("Áreas", areas_api, "areas")
    with col_niveles:
        render_catalogo("Niveles", niveles_api, "niveles")


# ============================================================
# TAB 4: CANTIDAD DE MEDALLAS
# ============================================================

COLS_MEDALLAS = ["areaId", "nivelId", "area", "nivel", "oros", "platas", "bronces", "notaMinAprobacion"]


def _save_medals(api, cambios):
    for fila in cambios:
        api.update(
            fila["areaId"], fila["nivelId"],
            fila["oros"], fila["platas"], fila["bronces"], fila["notaMinAprobacion"],
        )


with tab4:
    st.subheader("Parametrización de medallas por área y nivel")

    medallas_api = MedallasApi(get_client())
    try:
        medallas_df = pd.DataFrame(medallas_api.list(), columns=COLS_MEDALLAS)
    except ApiError as e:
        st.error(e.message)
        medallas_df = None

    if medallas_df is not None and medallas_df.empty:
        st.info("No hay áreas y niveles para parametrizar.")
    elif medallas_df is not None:
        edited = st.data_editor(
            medallas_df,
            num_rows="fixed",
            use_container_width=True,
            key="editor_medallas",
            column_config={
                "areaId": None,
                "nivelId": None,
                "area": st.column_config.TextColumn("Área", disabled=True),
                "nivel": st.column_config.TextColumn("Nivel", disabled=True),
                "oros": st.column_config.NumberColumn("Oro", step=1),
                "platas": st.column_config.NumberColumn("Plata", step=1),
                "bronces": st.column_config.NumberColumn("Bronce", step=1),
                "notaMinAprobacion": st.column_config.NumberColumn("Nota mínima", step=1),
            },
        )

        if st.button("Guardar cambios de medallas", key="guardar_medallas"):
            cambios = []
            errores = []
            for (_, original), (_, fila) in zip(medallas_df.iterrows(), edited.iterrows()):
                valores = {k: "" if pd.isna(fila[k]) else int(fila[k]) for k in MEDALLAS_SCHEMA}
                if all(str(valores[k]) == str(original[k]) for k in valores):
                    continue
                statuses = validate_form(MEDALLAS_SCHEMA, valores)
                if has_errors(statuses):
                    msgs = [f"{k}: {s.message}" for k, s in statuses.items() if s.error]
                    errores.append(f"{fila['area']} - {fila['nivel']}: " + "; ".join(msgs))
                else:
                    cambios.append(fila.to_dict())

            if errores:
                st.error("\n".join(errores))
            elif not cambios:
                st.info("No hay cambios para guardar.")
            else:
                coordinator.confirm(
                    message=f"¿Guardar la configuración de {len(cambios)} fila(s)?",
                    focus="guardar_medallas",
                    on_confirm=guarded(
                        partial(_save_medals, medallas_api, cambios),
                        "Cambios guardados.",
                        error_title="Error al guardar",
                    ),
                )
                st.rerun()


# ============================================================
# TAB 5: REGISTRO DE EVALUADORES
# ============================================================

with tab5:
    st.subheader("Registrar evaluador")

    with st.form("form_evaluador"):
        col_a, col_b = st.columns(2)
        with col_a:
            ev_nombre = st.text_input("Nombre")
            ev_ap_paterno = st.text_input("Apellido paterno")
            ev_ap_materno = st.text_input("Apellido materno")
            ev_correo = st.text_input("Correo")
            ev_telefono = st.text_input("Teléfono")
            ev_password = st.text_input("Contraseña", type="password")
            ev_confirm = st.text_input("Confirmar contraseña", type="password")
        with col_b:
            ev_tipo_doc = st.selectbox("Tipo de documento", ["CI", "Pasaporte"])
            ev_nro_doc = st.text_input("Número de documento")
            ev_complemento = st.text_input("Complemento (opcional)")
            ev_profesion = st.text_input("Profesión (opcional)")
            ev_institucion = st.text_input("Institución (opcional)")
            ev_cargo = st.text_input("Cargo (opcional)")
        registrar = st.form_submit_button("Registrar evaluador", key="registrar_evaluador")

    if registrar:
        valores = sanitize_form({
            "nombre": ev_nombre,
            "ap_paterno": ev_ap_paterno,
            "ap_materno": ev_ap_materno,
            "correo": ev_correo,
            "telefono": ev_telefono,
            "password": ev_password,
            "confirmPassword": ev_confirm,
            "tipo_documento": ev_tipo_doc,
            "numero_documento": ev_nro_doc,
            "complemento_documento": ev_complemento,
            "profesion": ev_profesion,
            "institucion": ev_institucion,
            "cargo": ev_cargo,
        })
        statuses = validate_form(EVALUADOR_SCHEMA, valores)
        if has_errors(statuses):
            for campo, status in statuses.items():
                if status.error:
                    st.error(f"{campo}: {status.message}")
        else:
            try:
                EvaluadoresApi(get_client()).register(valores)
            except OhSansiError as e:
                coordinator.error(
                    title="No se pudo registrar", message=str(e), focus="registrar_evaluador"
                )
            else:
                coordinator.success(
                    message=f"Evaluador {valores['nombre']} registrado.", focus="registrar_evaluador"
                )


# ============================================================
# TAB 6: FASES DE COMPETICIÓN
# ============================================================

FASE_ACCIONES = [
    ("🔓 Abrir fase", "abrir_fase", "¿Abrir la fase en curso?", "Fase abierta."),
    ("🔒 Cerrar fase", "cerrar_fase", "¿Cerrar la fase en curso?", "Fase cerrada."),
    (
        "📢 Publicar resultados",
        "publicar_resultados",
        "¿Publicar los resultados de la fase? Quedarán visibles para todos.",
        "Resultados publicados.",
    ),
]

with tab6:
    st.subheader("Gestionar fases de competición")

    fases = get_fases()
    administrador = (user or {}).get("nombreCompleto") or "Administrador"

    c1, c2 = st.columns(2)
    c1.metric("Estado de la olimpiada", fases.estado())
    c2.metric("Situación de la fase", fases.situacion())

    actual = fases.estado_id()
    nuevo = st.radio(
        "Estado de la olimpiada",
        list(ESTADOS),
        index=list(ESTADOS).index(actual),
        format_func=ESTADOS.get,
        horizontal=True,
    )
    if st.button("Cambiar estado", key="cambiar_estado", disabled=nuevo == actual):
        coordinator.confirm(
            message=f"¿Pasar la olimpiada a «{ESTADOS[nuevo]}»?",
            focus="cambiar_estado",
            on_confirm=guarded(
                partial(fases.cambiar_estado, nuevo, administrador),
                f"La olimpiada pasó a «{ESTADOS[nuevo]}».",
                error_title="No se pudo cambiar el estado",
            ),
        )
        st.rerun()

    for col, (label, metodo, pregunta, hecho) in zip(st.columns(3), FASE_ACCIONES):
        with col:
            if st.button(label, key=metodo, use_container_width=True):
                coordinator.confirm(
                    message=pregunta,
                    focus=metodo,
                    on_confirm=guarded(
                        partial(getattr(fases, metodo), administrador),
                        hecho,
                        error_title="Acción no permitida",
                    ),
                )
                st.rerun()

    st.markdown("---")
    st.subheader("Historial de cambios")

    historial = fases.historial()
    if not historial:
        st.info("Todavía no hay cambios registrados.")
    else:
        get_list_state(
            "historial_fases", page_size=HISTORIAL_PAGE_SIZE, sort_key="numero", sort_dir=DESC
        )
        render_table("historial_fases", pd.DataFrame(historial), HISTORIAL_COLUMNS)
        st.download_button(
            "⬇️ Exportar historial",
            data=to_csv(historial, headers=list(HISTORIAL_COLUMNS)),
            file_name="historial_fases.csv",
            mime="text/csv",
        )


# ============================================================
# TAB 7: GANADORES Y CERTIFICADOS
# ============================================================

COLS_INDIVIDUAL = {k: v for k, v in COLS_GANADORES.items() if k not in ("nombre_equipo", "integrantes")}
COLS_GRUPAL = {k: v for k, v in COLS_GANADORES.items() if k != "ci"}


def _enviar_correos(api, area, nivel):
    mensaje = api.enviar_correos(area, nivel)
    st.session_state["ganadores"] = api.ganadores(area, nivel)
    st.session_state["correos_resultado"] = mensaje


def render_ganadores(key, df, columns, data):
    if df.empty:
        st.info("No hay ganadores en esta modalidad.")
        return
    _, selected = render_table(key, df, columns, selectable=True)
    if selected is None:
        st.caption("Seleccione una fila para descargar su certificado.")
        return
    ganador = data["ganadores"][int(selected["idx"])]
    contenido = certificados_de(data, [ganador])
    if contenido is None:
        st.warning("El ganador seleccionado no tiene datos suficientes para el certificado.")
        return
    st.download_button(
        "📄 Certificado del seleccionado",
        data=contenido,
        file_name=f"certificado_{selected['ci'] or selected['nombre_equipo'] or 'ganador'}.html",
        mime="text/html",
        key=f"{key}_certificado",
    )


with tab7:
    st.subheader("Ganadores por categoría y emisión de certificados")

    premiados_api = PremiadosApi(get_client())
    try:
        filtros = premiados_api.filtros()
    except ApiError as e:
        st.error(f"No se pudieron cargar los filtros: {e.message}")
        filtros = []

    col_ar, col_ni = st.columns(2)
    with col_ar:
        area_sel = st.selectbox(
            "Área", [f["area"] for f in filtros], index=None,
            placeholder="Seleccione un área", key="ganadores_area",
        )
    with col_ni:
        nivel_sel = st.selectbox(
            "Nivel", niveles_de(filtros, area_sel), index=None,
            placeholder="Seleccione un nivel", key="ganadores_nivel",
            disabled=not area_sel,
        )

    if st.button("Consultar ganadores", key="consultar_ganadores", disabled=not (area_sel and nivel_sel)):
        try:
            st.session_state["ganadores"] = premiados_api.ganadores(area_sel, nivel_sel)
        except ApiError as e:
            st.session_state.pop("ganadores", None)
            coordinator.error(
                title="No se pudo obtener la información",
                message=e.message,
                focus="consultar_ganadores",
            )

    if "correos_resultado" in st.session_state:
        st.success(st.session_state.pop("correos_resultado"))

    data = st.session_state.get("ganadores")
    if data:
        categoria = data["categoria"]
        fase_final = data.get("fase_final") or {}
        totales = data.get("totales_por_medalla") or {}
        responsable = (data.get("responsable") or {}).get("nombre_completo")

        st.markdown(
            f"**{categoria.get('area', '')} – {categoria.get('nivel', '')}** · "
            f"Gestión {categoria.get('gestion', '')}"
        )
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Fase final", fase_final.get("estado") or "PENDIENTE")
        c2.metric("Correos", "Enviados" if fase_final.get("correos_enviados") else "No enviados")
        c3.metric("Total de ganadores", data.get("total_ganadores", len(data["ganadores"])))
        c4.metric("Responsable", responsable or "Sin asignar")
        st.caption(
            f"Oro: {totales.get('oro', 0)} · Plata: {totales.get('plata', 0)} · "
            f"Bronce: {totales.get('bronce', 0)} · Mención: {totales.get('mencion', 0)}"
        )

        ganadores_df = pd.DataFrame(
            [dict(ganador_row(g), idx=i) for i, g in enumerate(data["ganadores"])],
            columns=["idx", "modalidad"] + list(COLS_GANADORES),
        )
        tab_ind, tab_gru = st.tabs(["👤 Individual", "👥 Grupal"])
        with tab_ind:
            render_ganadores(
                "ganadores_ind", ganadores_df[ganadores_df["modalidad"] == "INDIVIDUAL"],
                COLS_INDIVIDUAL, data,
            )
        with tab_gru:
            render_ganadores(
                "ganadores_gru", ganadores_df[ganadores_df["modalidad"] != "INDIVIDUAL"],
                COLS_GRUPAL, data,
            )

        st.markdown("---")
        col_todos, col_csv, col_mail = st.columns(3)
        hay_ganadores = bool(data["ganadores"])
        with col_todos:
            todos = certificados_de(data) if hay_ganadores else None
            st.download_button(
                "📄 Certificados de todos",
                data=todos or "",
                file_name=nombre_archivo(data, "certificados", "html"),
                mime="text/html",
                disabled=todos is None,
            )
        with col_csv:
            st.download_button(
                "⬇️ Exportar CSV",
                data=ganadores_csv(data),
                file_name=nombre_archivo(data),
                mime="text/csv",
                disabled=not hay_ganadores,
            )
        with col_mail:
            reenviar = fase_final.get("correos_enviados")
            if st.button(
                "✉️ Reenviar correos" if reenviar else "✉️ Enviar correos",
                key="enviar_correos",
                disabled=not puede_enviar_correos(data),
                help="Disponible cuando la fase final está FINALIZADA.",
            ):
                coordinator.confirm(
                    title="Confirmar envío de correos",
                    message=(
                        f"Se {'reenviarán' if reenviar else 'enviarán'} los correos a los ganadores "
                        f"de {categoria.get('area', '')} – {categoria.get('nivel', '')}."
                    ),
                    confirm_label="Reenviar correos" if reenviar else "Enviar correos",
                    focus="enviar_correos",
                    on_confirm=guarded(
                        partial(
                            _enviar_correos, premiados_api,
                            categoria.get("area", ""), categoria.get("nivel", ""),
                        ),
                        "Correos procesados.",
                        error_title="No se pudieron enviar los correos",
                    ),
                )
                st.rerun()


# ============================================================
# MODAL ACTIVO (siempre al final)
# ============================================================

render_modal()
