import json
import logging
import time

import pandas as pd
import streamlit as st
import streamlit.components.v1 as components

from ohsansi.almacen import LocalStorage, MemoryStorage
from ohsansi.api import ApiClient
from ohsansi.auth import AuthStorage
from ohsansi.catalogos import AreasApi, NivelesApi
from ohsansi.config import configure_logging, load_settings
from ohsansi.errores import OhSansiError
from ohsansi.fases import FasesStore
from ohsansi.listado import ASC, DESC, ListState, page_window, range_label, run_pipeline
from ohsansi.modales import ModalCoordinator
from ohsansi.olimpistas import OlympianStore, SheetsOlympianStore, open_worksheet

logger = logging.getLogger(__name__)


# ============================================================
# RECURSOS COMPARTIDOS DE LA SESIÓN
# ============================================================

def get_settings():
    if "settings" not in st.session_state:
        try:
            secrets = st.secrets
            secrets.keys()
        except FileNotFoundError:
            secrets = None
        settings = load_settings(secrets)
        configure_logging(settings.log_level)
        st.session_state["settings"] = settings
    return st.session_state["settings"]


@st.cache_resource
def _local_storage(path):
    return LocalStorage(path)


def get_storage():
    return _local_storage(get_settings().storage_path)


@st.cache_resource
def _worksheet(sheet_name):
    return open_worksheet(st.secrets["gcp_service_account"], sheet_name)


def get_store():
    settings = get_settings()
    if settings.storage_backend == "sheets":
        return SheetsOlympianStore(_worksheet(settings.sheet_name))
    return OlympianStore(get_storage())


def get_fases():
    return FasesStore(get_storage())


def get_auth():
    # La sesión vive por pestaña, no en el archivo compartido
    if "auth_storage" not in st.session_state:
        st.session_state["auth_storage"] = MemoryStorage()
    return AuthStorage(st.session_state["auth_storage"])


def get_client():
    settings = get_settings()
    return ApiClient(settings.api_base_url, auth=get_auth(), timeout=settings.timeout)


def get_catalogos():
    # Una sola instancia por sesión para que la cache sobreviva a los reruns
    if "catalogos" not in st.session_state:
        client = get_client()
        st.session_state["catalogos"] = (AreasApi(client), NivelesApi(client))
    return st.session_state["catalogos"]


def get_coordinator():
    if "modal" not in st.session_state:
        st.session_state["modal"] = ModalCoordinator()
    return st.session_state["modal"]


def get_list_state(key, page_size=None, sort_key=None, sort_dir=ASC):
    state_key = f"list_{key}"
    if state_key not in st.session_state:
        st.session_state[state_key] = ListState(
            sort_key=sort_key,
            sort_dir=sort_dir,
            page_size=page_size or get_settings().page_size,
        )
    return st.session_state[state_key]


# ============================================================
# DIÁLOGO MODAL
# ============================================================

FOCUS_SCRIPT = """
<script>
const doc = window.parent.document;
const box = doc.querySelector({selector});
const el = box && box.querySelector("button, input, textarea, [tabindex]");
if (el) {{ el.focus(); }}
</script>
"""


def restore_focus(key):
    # Streamlit marca el contenedor de cada widget con la clase st-key-<key>
    selector = json.dumps(f".st-key-{key}")
    components.html(FOCUS_SCRIPT.format(selector=selector), height=0)


def render_modal():
    coordinator = get_coordinator()
    coordinator.tick()
    request = coordinator.active
    if request is None:
        key = coordinator.pop_restore()
        if key:
            restore_focus(key)
        return
    opts = request.options

    @st.dialog(
        f"{request.icon} {opts.title}",
        dismissible=not opts.block_close,
        on_dismiss=coordinator.dismiss,
    )
    def _dialog():
        st.write(opts.message)

        if opts.show_cancel:
            col_a, col_b = st.columns(2)
        else:
            col_a, col_b = None, st.container()

        if col_a is not None and col_a.button(opts.cancel_label, key="modal_cancelar"):
            coordinator.close(False)
            st.rerun()

        if col_b.button(
            opts.confirm_label,
            key="modal_confirmar",
            type="primary",
            disabled=opts.kind == "proceso",
        ):
            coordinator.close(True)
            st.rerun()

        remaining = request.remaining(coordinator.clock())
        if remaining is not None:
            time.sleep(remaining)
            coordinator.tick()
            st.rerun()

    _dialog()


# ============================================================
# TABLA + BUSCADOR + PAGINADOR
# ============================================================

def render_table(key, df, columns, search_columns=None, selectable=False):
    """
    Dibuja el buscador, el selector de orden, la tabla y el paginador.
    Devuelve la página mostrada (y la fila seleccionada si `selectable`).
    """
    state = get_list_state(key, sort_key=next(iter(columns), None))

    query = st.text_input("Buscar...", value=state.query, key=f"{key}_buscar")
    if query != state.query:
        state.set_query(query)

    col_a, col_b = st.columns([3, 1])
    with col_a:
        sort_options = list(columns)
        sort_key = st.selectbox(
            "Ordenar por",
            options=sort_options,
            index=sort_options.index(state.sort_key) if state.sort_key in sort_options else 0,
            format_func=lambda c: columns[c],
            key=f"{key}_orden",
        )
        if sort_key != state.sort_key:
            state.toggle_sort(sort_key)
    with col_b:
        st.write("")
        arrow = "↓" if state.sort_dir == DESC else "↑"
        if st.button(f"{arrow} Invertir", key=f"{key}_dir"):
            state.toggle_sort(state.sort_key)
            st.rerun()

    page = run_pipeline(df, state, columns=search_columns or list(columns))

    shown = page.rows[list(columns)].rename(columns=columns).reset_index(drop=True)
    shown.index = pd.RangeIndex(page.start, page.start + len(shown))
    selected = None
    if selectable and not page.rows.empty:
        event = st.dataframe(
            shown,
            use_container_width=True,
            on_select="rerun",
            selection_mode="single-row",
            key=f"{key}_tabla",
        )
        rows = event.selection.rows
        if rows:
            selected = page.rows.iloc[rows[0]].to_dict()
    else:
        st.dataframe(shown, use_container_width=True)

    render_pager(key, page, state)
    return page, selected


def render_pager(key, page, state):
    st.caption(range_label(page))
    numbers = page_window(page.page, page.total_pages)
    cols = st.columns(len(numbers) + 2)
    if cols[0].button("‹", key=f"{key}_prev", disabled=page.page == 1):
        state.page = page.page - 1
        st.rerun()
    for col, n in zip(cols[1:-1], numbers):
        if col.button(
            str(n),
            key=f"{key}_pag_{n}",
            type="primary" if n == page.page else "secondary",
        ):
            state.page = n
            st.rerun()
    if cols[-1].button("›", key=f"{key}_next", disabled=page.page == page.total_pages):
        state.page = page.page + 1
        st.rerun()


# ============================================================
# ACCIONES CON MODAL DE RESULTADO
# ============================================================

def guarded(action, success_message, error_title="Ocurrió un error", check=None,
            warning_title="Revise el resultado"):
    """
    Envuelve una acción para usarla como on_confirm: al terminar abre el modal
    de éxito, y si falla con un error del panel abre el modal de error.
    `check(resultado)` puede devolver un mensaje para mostrar una advertencia
    en lugar del éxito.
    """
    def _run():
        coordinator = get_coordinator()
        try:
            result = action()
        except OhSansiError as e:
            logger.error("Acción fallida: %s", e)
            coordinator.error(title=error_title, message=str(e))
            return
        message = check(result) if check is not None else None
        if message:
            coordinator.warn(title=warning_title, message=message)
        else:
            coordinator.success(message=success_message)
    return _run
