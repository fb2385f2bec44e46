import logging
import os
from dataclasses import dataclass

# ============================================================
# CONFIG: VARIABLES DE ENTORNO / ST.SECRETS
# ============================================================

DEFAULT_API_URL = "https://back-oh-sansi.vercel.app"
DEFAULT_STORAGE = "ohsansi_storage.json"
DEFAULT_SHEET = "OhSansiDB"

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    api_base_url: str = DEFAULT_API_URL
    storage_path: str = DEFAULT_STORAGE
    storage_backend: str = "local"  # "local" o "sheets"
    sheet_name: str = DEFAULT_SHEET
    page_size: int = 7
    timeout: float = 15.0
    log_level: str = "INFO"
    require_login: bool = True


def _as_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("0", "false", "no", "")


def load_settings(secrets=None, environ=None):
    """
    Lee la configuración del entorno (OHSANSI_*) y la sobreescribe con la
    sección [ohsansi] de st.secrets cuando existe.
    """
    if environ is None:
        environ = os.environ

    values = {
        "api_base_url": environ.get("OHSANSI_API_URL", DEFAULT_API_URL),
        "storage_path": environ.get("OHSANSI_STORAGE", DEFAULT_STORAGE),
        "storage_backend": environ.get("OHSANSI_BACKEND", "local"),
        "sheet_name": environ.get("OHSANSI_SHEET", DEFAULT_SHEET),
        "page_size": environ.get("OHSANSI_PAGE_SIZE", 7),
        "timeout": environ.get("OHSANSI_TIMEOUT", 15.0),
        "log_level": environ.get("OHSANSI_LOG_LEVEL", "INFO"),
        "require_login": environ.get("OHSANSI_REQUIRE_LOGIN", "1"),
    }

    section = {}
    if secrets is not None and "ohsansi" in secrets:
        section = dict(secrets["ohsansi"])
    for key in values:
        if key in section:
            values[key] = section[key]

    backend = str(values["storage_backend"]).strip().lower()
    if backend not in ("local", "sheets"):
        raise ValueError(f"Backend de almacenamiento desconocido: {backend}")

    return Settings(
        api_base_url=str(values["api_base_url"]).rstrip("/"),
        storage_path=str(values["storage_path"]),
        storage_backend=backend,
        sheet_name=str(values["sheet_name"]),
        page_size=max(1, int(values["page_size"])),
        timeout=float(values["timeout"]),
        log_level=str(values["log_level"]).upper(),
        require_login=_as_bool(values["require_login"]),
    )


def configure_logging(level="INFO"):
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level)
